SUBSCRIPTION_STATUS_ACTIVE = 'active'
SUBSCRIPTION_STATUS_PAUSED = 'paused'
SUBSCRIPTION_STATUS_CANCELLED = 'cancelled'
SUBSCRIPTION_STATUS_EXPIRED = 'expired'

SUBSCRIPTION_STATUS_VALUES = [
    SUBSCRIPTION_STATUS_ACTIVE,
    SUBSCRIPTION_STATUS_PAUSED,
    SUBSCRIPTION_STATUS_CANCELLED,
    SUBSCRIPTION_STATUS_EXPIRED,
]
# Statuses an operator may request; 'expired' is reserved for the sweeper.
USER_SETTABLE_STATUS_VALUES = [
    SUBSCRIPTION_STATUS_ACTIVE,
    SUBSCRIPTION_STATUS_PAUSED,
    SUBSCRIPTION_STATUS_CANCELLED,
]
# Statuses that still grant access until the end date.
USABLE_STATUS_VALUES = {SUBSCRIPTION_STATUS_ACTIVE, SUBSCRIPTION_STATUS_CANCELLED}

CUSTOM_PLAN_NAME_TEMPLATE = 'Custom Plan for Org {organization_id}'

GIB = 1024 * 1024 * 1024
MIB = 1024 * 1024

DEFAULT_MAX_PROJECTS = 1
DEFAULT_MAX_MEMBERS = 5
DEFAULT_SHARED_STORAGE_PER_PROJECT = 5 * GIB
DEFAULT_PRIVATE_STORAGE_PER_USER = 1 * GIB
