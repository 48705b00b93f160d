"""
Built-in data used on first run, after a reset, and whenever a persisted
collection cannot be read.

Realized hours are not seeded: reconciliation derives them from the logs.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from culiplan.model import (
    AttendanceStatus,
    CalendarEvent,
    ClassLog,
    Course,
    EvaluationCriterion,
    EventType,
    LearningOutcome,
    LegendItem,
    ScheduleSlot,
    SchoolInfo,
    SessionType,
    TeacherInfo,
    Unit,
    UnitAssociation,
)


def _unit(uid: str, title: str, description: str, theory: int, practice: int, terms: list[int]) -> Unit:
    return Unit(
        id=uid,
        title=title,
        description=description,
        hours_planned_theory=theory,
        hours_planned_practice=practice,
        terms=terms,
    )


def default_courses() -> list[Course]:
    return [
        Course(
            id="mod-prod-culinarios",
            name="Productos Culinarios",
            cycle="GM Cocina y Gastronomía",
            grade="2º Curso",
            weekly_hours=11,
            annual_hours=350,
            color="#ea580c",
            units=[
                _unit("m1-u1", "UD1: Organización de la Producción", "Planificación y Mise en Place", 10, 20, [1]),
                _unit("m1-u2", "UD2: Técnicas Culinarias Básicas", "Cocción, asado, fritura", 15, 35, [1, 2]),
                _unit("m1-u3", "UD3: Fondos y Salsas", "Elaboraciones base", 10, 30, [2]),
                _unit("m1-u4", "UD4: Guarniciones y Elementos Decorativos", "Acompañamientos", 5, 25, [2]),
                _unit("m1-u5", "UD5: Pescados y Mariscos", "Tratamiento de productos del mar", 15, 45, [3]),
                _unit("m1-u6", "UD6: Carnes y Aves", "Tratamiento de productos cárnicos", 15, 45, [3]),
            ],
            learning_outcomes=[
                LearningOutcome(
                    id="ra1",
                    code="RA1",
                    description="Organiza los procesos de producción culinaria, analizando la ficha técnica.",
                    weight=15,
                    criteria=[
                        EvaluationCriterion(
                            id="ce1a",
                            code="1.a",
                            description="Se han caracterizado los distintos modelos de producción.",
                            weight=40,
                            associations=[UnitAssociation("asoc-1", "m1-u1", ["Examen Teórico"])],
                        ),
                        EvaluationCriterion(
                            id="ce1b",
                            code="1.b",
                            description="Se han determinado las fases de la producción.",
                            weight=60,
                            associations=[
                                UnitAssociation("asoc-2", "m1-u1", ["Práctica de Taller", "Lista de Cotejo"])
                            ],
                        ),
                    ],
                ),
                LearningOutcome(
                    id="ra2",
                    code="RA2",
                    description="Aplica técnicas culinarias básicas para elaboraciones elementales.",
                    weight=25,
                    criteria=[
                        EvaluationCriterion(
                            id="ce2a",
                            code="2.a",
                            description="Se han seleccionado los útiles y herramientas.",
                            weight=30,
                            associations=[UnitAssociation("asoc-3", "m1-u2", ["Observación Directa"])],
                        ),
                        EvaluationCriterion(
                            id="ce2b",
                            code="2.b",
                            description="Se han ejecutado las operaciones de cocción según ficha técnica.",
                            weight=70,
                            associations=[
                                UnitAssociation("asoc-4", "m1-u2", ["Práctica de Taller", "Degustación"]),
                                UnitAssociation("asoc-5", "m1-u3", ["Práctica de Taller"]),
                            ],
                        ),
                    ],
                ),
            ],
        ),
        Course(
            id="mod-sostenible",
            name="Cocina Sostenible",
            cycle="GM Cocina y Gastronomía",
            grade="2º Curso",
            weekly_hours=2,
            annual_hours=63,
            color="#16a34a",
            units=[
                _unit("m2-u1", "UD1: Huella de Carbono", "Impacto ambiental", 10, 5, [1]),
                _unit("m2-u2", "UD2: Gestión de Residuos", "Zero Waste", 10, 10, [2]),
                _unit("m2-u3", "UD3: Producto de Km 0", "Proveedores locales", 10, 5, [3]),
            ],
        ),
        Course(
            id="mod-proyecto",
            name="Proyecto Intermodular",
            cycle="GM Cocina y Gastronomía",
            grade="2º Curso",
            weekly_hours=1,
            annual_hours=33,
            color="#4f46e5",
            units=[
                _unit("m3-u1", "UD1: Definición del Proyecto", "Ideación", 5, 0, [1]),
                _unit("m3-u2", "UD2: Planificación", "Cronograma", 5, 5, [2]),
                _unit("m3-u3", "UD3: Ejecución y Venta", "Puesta en marcha", 0, 15, [3]),
            ],
        ),
        Course(
            id="mod-pasteleria",
            name="Procesos Básicos de Pastelería",
            cycle="GM Cocina y Gastronomía",
            grade="1º Curso",
            weekly_hours=3,
            annual_hours=96,
            color="#db2777",
            units=[_unit("m4-u1", "UD1: Masas bases", "Masas quebradas y batidas", 5, 15, [1])],
        ),
    ]


def default_schedule() -> list[ScheduleSlot]:
    return [
        ScheduleSlot(1, "11:30", "14:15", "mod-pasteleria", 3, "Bloque Pastelería"),
        ScheduleSlot(2, "08:15", "11:00", "mod-prod-culinarios", 3, "Bloque Mañana"),
        ScheduleSlot(2, "11:30", "12:25", "mod-prod-culinarios", 1, "Sesión Post-Recreo"),
        ScheduleSlot(3, "08:15", "10:05", "mod-sostenible", 2, "Bloque Sostenible"),
        ScheduleSlot(4, "09:10", "11:00", "mod-prod-culinarios", 2, "Mañana"),
        ScheduleSlot(4, "11:30", "13:20", "mod-prod-culinarios", 2, "Mediodía"),
        ScheduleSlot(4, "13:20", "15:25", "mod-prod-culinarios", 2, "Tarde"),
        ScheduleSlot(5, "08:15", "09:10", "mod-prod-culinarios", 1, "1ª Hora"),
        ScheduleSlot(5, "10:05", "11:00", "mod-proyecto", 1, "Proyecto Intermodular"),
    ]


def initial_logs(today: Optional[date] = None) -> list[ClassLog]:
    today = today or date.today()
    return [
        ClassLog(
            id="log-1",
            date=today.isoformat(),
            course_id="mod-prod-culinarios",
            unit_id="m1-u2",
            hours=3,
            session_type=SessionType.PRACTICE,
            attendance=AttendanceStatus.DELIVERED,
            notes="Realización de fondos oscuros. El alumnado ha respondido bien a los tiempos de cocción.",
        )
    ]


def default_legend() -> list[LegendItem]:
    return [
        LegendItem("leg-1", "Inicio y fin de actividades lectivas FP", "#DC2626"),
        LegendItem("leg-2", "1ª Evaluación Parcial", "#FBBF24"),
        LegendItem("leg-3", "2ª Ev. Parcial (Modelo Concentrado)", "#FBCFE8"),
        LegendItem("leg-4", "2ª Ev. Parcial (Modelo Estandar)", "#A3E635"),
        LegendItem("leg-5", "Ex. Recup. y Perdida Eval. Continua", "#F472B6"),
        LegendItem("leg-6", "Evaluación Final 1ª Conv. Ordinaria", "#9333EA"),
        LegendItem("leg-7", "Exámenes Recuperación (2ª ordinaria)", "#22D3EE"),
        LegendItem("leg-8", "Evaluación Final 2ª Conv. Ordinaria", "#F3E5AB"),
        LegendItem("leg-9", "FCT (Inicio/Fin)", "#94A3B8"),
    ]


def _academic(eid: str, day: str, legend_id: str, title: str) -> CalendarEvent:
    return CalendarEvent(id=eid, date=day, legend_item_id=legend_id, type=EventType.ACADEMIC, title=title)


def default_events() -> list[CalendarEvent]:
    return [
        _academic("evt-1", "2025-09-15", "leg-1", "Inicio de Curso"),
        _academic("evt-2", "2025-12-17", "leg-2", "1ª Evaluación"),
        _academic("evt-3", "2025-12-18", "leg-2", "Sesiones Evaluación"),
        _academic("evt-4", "2025-12-19", "leg-2", "Entrega de Notas"),
        CalendarEvent(
            id="srv-1",
            date="2025-11-25",
            type=EventType.SERVICE,
            title="Servicio Restaurante: Menú Degustación",
            description="Servicio de mediodía con grupos de 2º GM.",
        ),
        CalendarEvent(
            id="srv-1-order",
            date="2025-11-17",
            type=EventType.ORDER,
            title="HACER PEDIDO: Servicio 25/Nov",
            description="Realizar pedido a proveedores principales (Frutas, Carnes, Pescados).",
            linked_event_id="srv-1",
            completed=True,
        ),
        CalendarEvent(
            id="srv-1-stock",
            date="2025-11-14",
            type=EventType.ORDER,
            title="CERRAR STOCK: Previo Pedido",
            description="Inventario final de cámaras.",
            linked_event_id="srv-1",
            completed=True,
        ),
        CalendarEvent(
            id="srv-1-menu",
            date="2025-11-01",
            type=EventType.MENU,
            title="DISEÑO MENÚ: Servicio 25/Nov",
            description="Definición de platos y fichas técnicas.",
            linked_event_id="srv-1",
            completed=True,
        ),
        CalendarEvent(
            id="srv-2",
            date="2026-02-28",
            type=EventType.SERVICE,
            title="Jornadas Gastronómicas",
            description="Servicio especial con invitados.",
        ),
        CalendarEvent(
            id="srv-2-order",
            date="2026-02-16",
            type=EventType.ORDER,
            title="HACER PEDIDO: Jornadas",
            description="Pedido especial mariscos.",
            linked_event_id="srv-2",
        ),
        _academic("evt-5", "2026-02-20", "leg-5", "Ex. Recuperación"),
        _academic("evt-6", "2026-02-23", "leg-5", "Ex. Recuperación"),
        _academic("evt-7", "2026-03-18", "leg-4", "2ª Evaluación"),
        _academic("evt-8", "2026-03-20", "leg-4", "Entrega Notas 2ª Ev"),
        _academic("evt-9", "2026-06-01", "leg-6", "Evaluación Final"),
        _academic("evt-10", "2026-06-02", "leg-6", "Juntas Evaluación"),
        _academic("evt-11", "2026-06-03", "leg-6", "Reclamaciones"),
        _academic("evt-12", "2026-06-10", "leg-6", "Actas Finales"),
        _academic("evt-13", "2026-06-11", "leg-6", "Graduación"),
        _academic("evt-14", "2026-06-12", "leg-6", "Fin Actividades"),
        _academic("evt-15", "2026-06-16", "leg-7", "Ex. Extraordinaria"),
        _academic("evt-16", "2026-06-17", "leg-7", "Ex. Extraordinaria"),
        _academic("evt-17", "2026-06-18", "leg-7", "Sesiones Extraordinaria"),
        _academic("evt-18", "2026-06-18", "leg-1", "Claustro Final"),
        _academic("evt-19", "2026-06-19", "leg-8", "Entrega Notas Extra"),
        _academic("evt-20", "2026-06-22", "leg-8", "Cierre Curso"),
    ]


# Evaluation sessions handed to the assistant as context
EVALUATIONS = [
    {"id": "e1", "title": "1ª Evaluación Parcial", "date": "2025-12-17", "type": "Parcial", "completed": False},
    {"id": "e3", "title": "2ª Evaluación Parcial", "date": "2026-03-18", "type": "Parcial", "completed": False},
    {"id": "e4", "title": "Evaluación Final 1ª Ord.", "date": "2026-06-01", "type": "Final", "completed": False},
    {"id": "e5", "title": "Evaluación Final 2ª Ord.", "date": "2026-06-19", "type": "Extraordinaria", "completed": False},
]


def default_school_info() -> SchoolInfo:
    return SchoolInfo(
        name="IES La Flota",
        logo_url="",
        academic_year="2025-2026",
        department="Dpto. Hostelería y Turismo",
    )


def default_teacher_info() -> TeacherInfo:
    return TeacherInfo(name="Juan Codina", role="Profesor Técnico FP", avatar_url="")
