"""Subscription and payment response models."""

from datetime import date, datetime
from typing import List, Optional

from ouderschaps_api.schemas.common import CamelModel


class TrialInfoOut(CamelModel):
    has_trial: bool
    trial_end_date: Optional[date] = None
    message: str


class CheckoutOut(CamelModel):
    checkout_url: Optional[str] = None
    subscription_id: int
    payment_id: str
    customer_id: str
    is_retry: bool = False
    previous_status: Optional[str] = None
    trial_info: TrialInfoOut


class AbonnementOut(CamelModel):
    id: int
    plan_type: str
    status: str
    start_datum: date
    eind_datum: Optional[date] = None
    trial_eind_datum: Optional[date] = None
    in_trial_period: bool = False
    maandelijks_bedrag: float
    volgende_betaling: Optional[date] = None


class BetalingOut(CamelModel):
    id: int
    bedrag: float
    status: str
    betaal_datum: Optional[datetime] = None
    aangemaakt_op: Optional[datetime] = None


class SubscriptionStatusOut(CamelModel):
    has_active_subscription: bool
    subscription: Optional[AbonnementOut] = None
    recent_payments: List[BetalingOut] = []
    next_payment_date: Optional[date] = None


class CanceledAbonnementOut(CamelModel):
    id: int
    status: str
    eind_datum: Optional[date] = None


class CancelOut(CamelModel):
    message: str
    subscription: CanceledAbonnementOut
