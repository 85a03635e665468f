"""
Standard type definitions for database models.

Provides consistent types for monetary and percentage fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard money type for salaries, payments, commissions
# Precision: 12 digits total, 2 after decimal point
MoneyType = DECIMAL(12, 2)

# Percentage type for commission and bonus rates
# Range: 0.00 to 999.99
PercentType = DECIMAL(5, 2)

# Quantity type for fractional content shares and hours
QuantityType = DECIMAL(12, 4)
