from babyspa.schemas.appointment import (
    AppointmentRead,
    BulkAppointmentCreate,
    BulkAppointmentItem,
    BulkAppointmentResult,
    BulkConflictRead,
    ConflictCheckResponse,
    ConflictRead,
)
from babyspa.schemas.baby import BabyCreate, BabyRead
from babyspa.schemas.package import (
    InstallmentDetailRead,
    InstallmentsOverviewRead,
    PackagePaymentCreate,
    PackagePaymentRead,
    PackagePurchaseCreate,
    PackagePurchaseRead,
    PaymentStatusRead,
    PaymentSummaryRead,
    SchedulePreferencesUpdate,
)
from babyspa.schemas.scheduling import (
    AvailableTimesRead,
    GeneratedSlotRead,
    SchedulePreferenceSchema,
    SchedulePreviewRequest,
    SchedulePreviewResponse,
    ScheduleSpanRead,
)
from babyspa.schemas.system import StatusResponse

__all__ = [
    "AppointmentRead",
    "AvailableTimesRead",
    "BabyCreate",
    "BabyRead",
    "BulkAppointmentCreate",
    "BulkAppointmentItem",
    "BulkAppointmentResult",
    "BulkConflictRead",
    "ConflictCheckResponse",
    "ConflictRead",
    "GeneratedSlotRead",
    "InstallmentDetailRead",
    "InstallmentsOverviewRead",
    "PackagePaymentCreate",
    "PackagePaymentRead",
    "PackagePurchaseCreate",
    "PackagePurchaseRead",
    "PaymentStatusRead",
    "PaymentSummaryRead",
    "SchedulePreferenceSchema",
    "SchedulePreferencesUpdate",
    "SchedulePreviewRequest",
    "SchedulePreviewResponse",
    "ScheduleSpanRead",
    "StatusResponse",
]
