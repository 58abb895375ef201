"""
Subscription plans and pricing (amounts in INR)
"""

PLANS = {
    "core": {
        "id": "core",
        "name": "Core",
        "price": 1999,
        "interval": "month",
        "features": [
            "Appointments & calendar",
            "Customer management",
            "Billing & invoices",
            "Up to 3 staff members",
            "Basic reports",
        ],
    },
    "standard": {
        "id": "standard",
        "name": "Standard",
        "price": 4999,
        "interval": "month",
        "features": [
            "Everything in Core",
            "Inventory & suppliers",
            "Staff attendance",
            "Coupons & discounts",
            "Up to 10 staff members",
            "Advanced reports",
        ],
    },
    "premium": {
        "id": "premium",
        "name": "Premium",
        "price": 6999,
        "interval": "month",
        "features": [
            "Everything in Standard",
            "Unlimited staff",
            "WhatsApp notifications",
            "Priority support",
            "Data export",
        ],
    },
}

SETUP_FEES = {
    "core": 3999,
    "standard": 4999,
    "premium": 2999,
}


def calculate_subscription_amount(plan_id: str, include_setup: bool = False) -> dict:
    """
    Price breakdown for a plan.

    Raises:
        ValueError: unknown plan
    """
    plan = PLANS.get(plan_id)
    if not plan:
        raise ValueError(f"Invalid plan: {plan_id}")

    setup_fee = SETUP_FEES.get(plan_id, 0) if include_setup else 0
    return {
        "planAmount": plan["price"],
        "setupFee": setup_fee,
        "total": plan["price"] + setup_fee,
    }
