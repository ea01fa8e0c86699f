"""
Taxonomie des erreurs du parcours d'inscription.

- ValidationError: erreur locale, par champ, bloque le passage à l'étape suivante
- WizardError: navigation interdite dans l'assistant (saut d'étape, étape inconnue)
- RecordStoreError: insert/update/select refusé par Supabase
- PaymentSetupError: création du PaymentIntent refusée (montant/email/champs manquants)
- PaymentDeclinedError: confirmation de la carte refusée (déclin ou erreur de validation Stripe)
"""
from typing import Dict, Optional

GENERIC_FAILURE_MESSAGE = "Please try again or contact support"


class RegistrationError(Exception):
    title = "Registration failed"
    status_code = 400

    def __init__(self, message: str = "", code: str = "error"):
        super().__init__(message or self.title)
        self.message = message or self.title
        self.code = code


class ValidationError(RegistrationError):
    title = "Invalid form data"
    status_code = 400

    def __init__(self, errors: Dict[str, str], message: str = ""):
        first = next(iter(errors.values()), "") if errors else ""
        super().__init__(message or first or self.title, code="validation_error")
        self.errors = dict(errors or {})


class WizardError(RegistrationError):
    title = "Invalid registration step"
    status_code = 409

    def __init__(self, message: str = "", code: str = "invalid_step"):
        super().__init__(message, code=code)


class RecordStoreError(RegistrationError):
    title = "Failed to save registration"
    status_code = 502

    def __init__(self, message: str = "", operation: Optional[str] = None):
        super().__init__(message, code="record_store_error")
        self.operation = operation


class PaymentSetupError(RegistrationError):
    title = "Payment setup failed"
    status_code = 502

    def __init__(self, message: str = ""):
        super().__init__(message, code="payment_setup_error")


class PaymentDeclinedError(RegistrationError):
    title = "Payment failed"
    status_code = 402

    def __init__(self, message: str = "", decline_code: Optional[str] = None):
        super().__init__(message, code="payment_declined")
        self.decline_code = decline_code
