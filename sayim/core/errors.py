"""
Error taxonomy for the counting workflow.

Every error carries a user-facing ``message``. Network and validation errors
are raised where they are detected and turned into a message by the count
session; persistence errors are only raised when the store is configured to
fail loudly.
"""

from typing import Optional


class CountError(Exception):
    default_message = "Beklenmeyen bir hata oluştu."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CatalogUnavailable(CountError):
    """Transport or decoding failure talking to the remote catalog."""

    default_message = "Sunucuya ulaşılamadı."


class ServerRejected(CountError):
    """The remote service answered but reported a logical failure."""

    default_message = "Sunucu isteği reddetti."


class ProductNotFound(ServerRejected):
    default_message = "Ürün bulunamadı."


class SubmissionRejected(ServerRejected):
    default_message = "Sayım listesi aktarılamadı."


class ValidationFailed(CountError):
    """A local precondition failed; nothing was mutated."""

    default_message = "Geçersiz işlem."


class NoProductSelected(ValidationFailed):
    default_message = "Önce bir ürün sorgulayın."


class NoDepotSelected(ValidationFailed):
    default_message = "Depo seçimi zorunludur."


class DepotNotSelected(NoDepotSelected):
    # raised before a barcode lookup
    default_message = "Önce depo seçiniz."


class UnknownDepot(ValidationFailed):
    default_message = "Seçilen depo listede yok."


class InvalidQuantity(ValidationFailed):
    default_message = "Geçerli bir sayım adeti giriniz."


class EmptyBarcode(ValidationFailed):
    default_message = "Barkod giriniz."


class EmptySubmission(ValidationFailed):
    default_message = "Aktarılacak sayım kaydı yok."


class PersistenceDegraded(CountError):
    default_message = "Yerel sayım listesi okunamadı veya kaydedilemedi."


class SubmissionInProgress(ValidationFailed):
    default_message = "Aktarım sürüyor, lütfen bekleyiniz."
