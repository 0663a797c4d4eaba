from enum import Enum


class PayPeriod(str, Enum):
    MENSUAL = "mensual"
    QUINCENAL = "quincenal"
    SEMANAL = "semanal"


class Currency(str, Enum):
    COLONES = "colones"
    DOLARES = "dolares"
    COLONES_Y_DOLARES = "colones_y_dolares"


class RecordStatus(str, Enum):
    """Approval/processing state of an adjustment record.

    Values coming from forms or older rows are parsed with :meth:`parse`,
    which ignores surrounding whitespace and case and folds the gendered
    variants ("Aprobada", "Procesado") onto a single member.
    """

    PENDIENTE = "Pendiente"
    APROBADO = "Aprobado"
    PROCESADA = "Procesada"
    RECHAZADO = "Rechazado"

    @classmethod
    def parse(cls, value) -> "RecordStatus":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().casefold()
        try:
            return _STATUS_ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown record status: {value!r}") from None


_STATUS_ALIASES = {
    "pendiente": RecordStatus.PENDIENTE,
    "aprobado": RecordStatus.APROBADO,
    "aprobada": RecordStatus.APROBADO,
    "aplicado": RecordStatus.APROBADO,
    "aplicada": RecordStatus.APROBADO,
    "procesada": RecordStatus.PROCESADA,
    "procesado": RecordStatus.PROCESADA,
    "rechazado": RecordStatus.RECHAZADO,
    "rechazada": RecordStatus.RECHAZADO,
}


class PayrollState(str, Enum):
    EN_PROCESO = "En Proceso"
    PROCESADA = "Procesada"
    CERRADA = "Cerrada"


class IncreaseKind(str, Enum):
    MONTO = "monto"
    PORCENTAJE = "porcentaje"
