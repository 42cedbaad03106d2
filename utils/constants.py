APP_NAME = "Family Budget"
DB_FILE = "family_budget.db"
DB_ENV_VAR = "FAMILY_BUDGET_DB"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# ── Periods ──────────────────────────────────────────────────────────────────
# Budgets and income are stored as monthly figures; every other period is
# derived with these fixed factors (no calendar-aware day counts).
PERIODS = ("day", "week", "month", "year")
DEFAULT_PERIOD = "month"
DAYS_PER_MONTH = 30
WEEKS_PER_MONTH = 4
MONTHS_PER_YEAR = 12

# ── Definitions ──────────────────────────────────────────────────────────────
MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31
LARGE_EXPENSE_MONTHS = 12
INCOME_PAY_PERIODS_PER_MONTH = 2   # bi-weekly paycheck entered, monthly stored

SOURCE_RECURRING = "recurring"
SOURCE_LARGE = "large"

RECURRING_NOTE_SUFFIX = "(Auto-generated)"
RECURRING_SENTINEL_NOTE = "Recurring expense (Auto-generated)"
LARGE_NOTE_SUFFIX = "(Monthly portion)"
LARGE_SENTINEL_NOTE = "Large expense (Monthly portion)"

# ── Category flows ───────────────────────────────────────────────────────────
FLOW_NORMAL = "normal"
FLOW_RECURRING = "recurring"
FLOW_LARGE = "large"
FLOWS = (FLOW_NORMAL, FLOW_RECURRING, FLOW_LARGE)

UNKNOWN_USER_NAME = "Unknown"
UNKNOWN_COLOR = "#888888"
UNKNOWN_CATEGORY_NAME = "Unknown"
UNKNOWN_CATEGORY_COLOR = "#6B7280"

CATEGORY_COLORS = [
    "#F59E0B", "#8B5CF6", "#6B7280", "#EC4899", "#06B6D4",
    "#84CC16", "#F97316", "#EF4444", "#10B981", "#3B82F6",
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#FFB347", "#87CEEB", "#D8BFD8",
    "#F0E68C", "#FFA07A", "#20B2AA", "#FF69B4", "#9370DB",
]

RECENT_INCOME_LIMIT = 10
