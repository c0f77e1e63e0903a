"""Storefront error taxonomy"""


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    pass


class IntegrityError(StorefrontError):
    """Submission cannot be turned into a consistent order; not user-correctable"""
    pass


class UnknownProductError(IntegrityError):
    """A submitted product id is absent from the authoritative catalog"""

    def __init__(self, document_ids: list[str]):
        self.document_ids = document_ids
        super().__init__(f"Product was not found: {', '.join(document_ids)}")


class MissingPurchaserError(IntegrityError):
    """No account could be resolved to own the order"""
    pass


class DuplicateAccountError(StorefrontError):
    """The backend refused to create an account for an email it already knows"""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"An account already exists for {email}")
