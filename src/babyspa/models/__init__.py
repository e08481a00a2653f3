from babyspa.models.appointment import Appointment
from babyspa.models.baby import Baby
from babyspa.models.package import PackagePayment, PackagePurchase

__all__ = [
    "Appointment",
    "Baby",
    "PackagePayment",
    "PackagePurchase",
]
