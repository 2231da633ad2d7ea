"""Token Vesting Accounting Engine.

Computes, at any instant, how much of a beneficiary's allocation has matured,
how much has been withdrawn, and how much may be withdrawn early against a
penalty. Supports elimination of a beneficiary's unvested remainder and
schedule-paced collection of forfeited and penalty fees.
"""

__version__ = "0.1.0"
