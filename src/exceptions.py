class APIError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400, details: dict = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details

class BusinessError(Exception):
    def __init__(self, code: str, message: str, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

class ReferralCodeNotFoundError(BusinessError):
    def __init__(self, message: str = "Referral code not found"):
        super().__init__(code="referral_code_not_found", message=message)

class ReferralCodeAlreadyExistsError(BusinessError):
    def __init__(self, code: str):
        super().__init__(
            code="referral_code_already_exists",
            message=f"Referral code already exists: {code}",
            details={"code": code}
        )
