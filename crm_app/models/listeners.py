from datetime import datetime, timezone

from sqlalchemy import event

from crm_app.models.activity import Activity
from crm_app.models.chat import ChatSession
from crm_app.models.customer import Customer
from crm_app.models.customization import UICustomization
from crm_app.models.deal import Deal
from crm_app.models.ticket import Ticket
from crm_app.models.user_settings import UserSettings
from crm_app.models.workflow import WorkflowRule


# Auto updated_at
@event.listens_for(UICustomization, "before_update")
@event.listens_for(ChatSession, "before_update")
@event.listens_for(UserSettings, "before_update")
@event.listens_for(Customer, "before_update")
@event.listens_for(Deal, "before_update")
@event.listens_for(Ticket, "before_update")
@event.listens_for(Activity, "before_update")
@event.listens_for(WorkflowRule, "before_update")
def update_timestamp(mapper, connection, target):
    target.updated_at = datetime.now(timezone.utc)
