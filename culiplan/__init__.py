"""CuliPlan: academic planning for culinary vocational courses."""
