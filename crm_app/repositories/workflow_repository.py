from crm_app.models.workflow import WorkflowRule
from crm_app.repositories.base import OwnedRepository


class WorkflowRuleRepository(OwnedRepository[WorkflowRule]):
    """Encapsulates queries against the ``workflow_rules`` table."""

    model = WorkflowRule
