"""
Per-operation failure policy.

Every store operation records a failure in the store's ``error`` field.
Silent operations stop there: they are fired from view lifecycle hooks with
no caller to catch anything. Propagating operations also re-raise, because
the UI flows behind them (modals, confirmations) branch on the outcome.
"""
from enum import Enum


class ErrorPolicy(Enum):
    SILENT = "silent"
    PROPAGATING = "propagating"


OPERATION_POLICIES = {
    # accounts
    "load_accounts": ErrorPolicy.SILENT,
    "add_account": ErrorPolicy.PROPAGATING,
    "delete_account": ErrorPolicy.PROPAGATING,
    "set_default_account": ErrorPolicy.PROPAGATING,
    "test_connection": ErrorPolicy.PROPAGATING,
    # mail
    "load_folders": ErrorPolicy.SILENT,
    "load_emails": ErrorPolicy.SILENT,
    "load_email_detail": ErrorPolicy.SILENT,
    "mark_as_read": ErrorPolicy.SILENT,
    "delete_email": ErrorPolicy.PROPAGATING,
    "move_email": ErrorPolicy.PROPAGATING,
    "send_email": ErrorPolicy.PROPAGATING,
    "clear_email_cache": ErrorPolicy.PROPAGATING,
    # AI
    "classify_email": ErrorPolicy.PROPAGATING,
    "summarize_email": ErrorPolicy.PROPAGATING,
    "translate_text": ErrorPolicy.PROPAGATING,
    "generate_reply": ErrorPolicy.PROPAGATING,
    "extract_key_info": ErrorPolicy.PROPAGATING,
    # config
    "load_config": ErrorPolicy.SILENT,
    "update_config": ErrorPolicy.PROPAGATING,
    "set_ai_api_key": ErrorPolicy.PROPAGATING,
    "load_filter_rules": ErrorPolicy.SILENT,
    "save_filter_rule": ErrorPolicy.PROPAGATING,
    "delete_filter_rule": ErrorPolicy.PROPAGATING,
}


def policy_for(operation: str) -> ErrorPolicy:
    """Look up the failure policy of a store operation."""
    try:
        return OPERATION_POLICIES[operation]
    except KeyError:
        raise KeyError(f"No error policy registered for operation '{operation}'") from None
