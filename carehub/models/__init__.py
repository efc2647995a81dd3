from carehub.models.user import User, UserCapability
from carehub.models.doctor import Doctor
from carehub.models.patient import Patient
from carehub.models.appointment import Appointment
from carehub.models.prescription import Prescription, PrescriptionItem
