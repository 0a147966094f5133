# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, String, DateTime, Boolean, Enum
from datetime import datetime
from dayplanner.models.database import Base
import enum

class PremiumPlan(enum.Enum):
    monthly = "monthly"
    yearly = "yearly"

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)  # auth provider uid
    email = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # ✅ Premium / billing
    is_premium = Column(Boolean, default=False, nullable=False)
    premium_plan = Column(Enum(PremiumPlan), nullable=True)
    premium_start_date = Column(DateTime, nullable=True)
    next_billing_date = Column(DateTime, nullable=True)
    stripe_customer_id = Column(String, nullable=True)
    stripe_subscription_id = Column(String, nullable=True)

    def __repr__(self):
        plan = self.premium_plan.value if self.premium_plan else None
        return f"<User id={self.id} premium={self.is_premium} plan={plan}>"
