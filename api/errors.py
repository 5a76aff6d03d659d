from fastapi import HTTPException, status


class BusinessRuleError(Exception):
    """Base for every typed failure the services report to the caller."""
    code = "business_rule"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code


class NotFound(BusinessRuleError):
    code = "not_found"
    http_status = status.HTTP_404_NOT_FOUND


class InvalidTransition(BusinessRuleError):
    """Requested edge is not in the state graph. Retrying the same request is pointless."""
    code = "invalid_transition"
    http_status = status.HTTP_409_CONFLICT


class NotAWithdrawal(InvalidTransition):
    code = "not_a_withdrawal"


class PreconditionFailed(BusinessRuleError):
    """Conditional write matched zero rows: the caller acted on stale state and may refresh and retry."""
    code = "precondition_failed"
    http_status = status.HTTP_409_CONFLICT


class ProofRequired(PreconditionFailed):
    code = "proof_required"
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY


class AlreadyFinalized(BusinessRuleError):
    code = "already_finalized"
    http_status = status.HTTP_409_CONFLICT


class SurveyNotDone(BusinessRuleError):
    code = "survey_not_done"
    http_status = status.HTTP_409_CONFLICT


class MissingPartner(BusinessRuleError):
    code = "missing_partner"
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY


class NoPayableInvoice(BusinessRuleError):
    code = "no_payable_invoice"
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY


class MultiplePayableInvoices(BusinessRuleError):
    code = "multiple_payable_invoices"
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY


class InsufficientBalance(BusinessRuleError):
    code = "insufficient_balance"
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY


class InvalidAmount(BusinessRuleError):
    code = "invalid_amount"
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY


class DuplicateRecord(BusinessRuleError):
    code = "duplicate"
    http_status = status.HTTP_409_CONFLICT


def to_http(e: BusinessRuleError) -> HTTPException:
    return HTTPException(status_code=e.http_status, detail={"code": e.code, "message": e.message})
