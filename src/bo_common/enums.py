"""Global enums — must match DB CHECK constraints exactly (see alembic/versions)."""

from enum import Enum


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ExpenseType(str, Enum):
    PROMOTION = "Promotion"
    SALARY = "Salary"
    MISCELLANEOUS = "Miscellaneous"
    IB_COMMISSION = "IB Commission"
    TRAVEL_EXPENSE = "Travel Expense"


class DateFilter(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class ActivityAction(str, Enum):
    # Auth
    SIGNUP = "signup"
    LOGIN = "login"
    CHANGE_PASSWORD = "change_password"
    PASSWORD_RESET = "password_reset"
    UPDATE_PROFILE = "update_profile"
    # Staff / roles
    ADD_STAFF = "add_staff"
    EDIT_STAFF = "edit_staff"
    DELETE_STAFF = "delete_staff"
    REFRESH_PERMISSIONS = "refresh_permissions"
    ADD_ROLE = "add_role"
    EDIT_ROLE = "edit_role"
    DELETE_ROLE = "delete_role"
    # Deposit entries
    ADD_DEPOSIT = "add_deposit"
    EDIT_DEPOSIT = "edit_deposit"
    DELETE_DEPOSIT = "delete_deposit"
    # Banks / bank transactions
    ADD_BANK = "add_bank"
    EDIT_BANK = "edit_bank"
    DELETE_BANK = "delete_bank"
    ADD_BANK_DEPOSIT = "add_bank_deposit"
    EDIT_BANK_DEPOSIT = "edit_bank_deposit"
    DELETE_BANK_DEPOSIT = "delete_bank_deposit"
    # Activity log itself
    DELETE_ACTIVITY = "delete_activity"
    BULK_DELETE_ACTIVITIES = "bulk_delete_activities"


# Actions shown in the dashboard's "recent activity" feed
FINANCIAL_ACTIONS: frozenset[str] = frozenset(
    {
        ActivityAction.ADD_DEPOSIT.value,
        ActivityAction.EDIT_DEPOSIT.value,
        ActivityAction.DELETE_DEPOSIT.value,
        ActivityAction.ADD_BANK_DEPOSIT.value,
        ActivityAction.EDIT_BANK_DEPOSIT.value,
        ActivityAction.DELETE_BANK_DEPOSIT.value,
    }
)

SUPER_ADMIN_ROLE = "Super Admin"
ADMIN_ROLE = "Admin"
ADMIN_ROLES: frozenset[str] = frozenset({SUPER_ADMIN_ROLE, ADMIN_ROLE})
