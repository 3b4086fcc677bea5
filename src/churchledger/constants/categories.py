"""
Default category lists used for ingestion matching and budgeting.
Deployments can override either list through configuration.
"""

# Transaction Categories - Income
INCOME_CATEGORIES = [
    "Tithes & Offerings",
    "Tithe",
    "Offering",
    "Donation",
    "Building Fund",
    "Missions",
    "Special Offering",
    "Thanksgiving",
    "Fundraising",
    "Rental Income",
    "Interest",
    "Other Income",
]

# Transaction Categories - Expenses
EXPENSE_CATEGORIES = [
    "Salaries",
    "Utilities",
    "Rent",
    "Maintenance",
    "Supplies",
    "Outreach",
    "Missions Support",
    "Benevolence",
    "Events",
    "Worship & Music",
    "Youth Ministry",
    "Children's Ministry",
    "Insurance",
    "Transportation",
    "Office Expenses",
    "Bank Fees",
]

# Fallback applied when an imported category is unknown.
FALLBACK_CATEGORY = "Other"

# Donor identity used when a gift carries no donor name.
ANONYMOUS_DONOR = "Anonymous"


def all_categories(
    income: list[str] | None = None, expense: list[str] | None = None
) -> list[str]:
    """Return income + expense categories without duplicates, income first."""

    combined: list[str] = []
    seen: set[str] = set()
    for name in [*(income if income is not None else INCOME_CATEGORIES),
                 *(expense if expense is not None else EXPENSE_CATEGORIES)]:
        if name not in seen:
            seen.add(name)
            combined.append(name)
    return combined
