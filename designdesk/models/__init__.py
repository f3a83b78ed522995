"""Database models package"""

from designdesk.models.base import BaseModel
from designdesk.models.user import User
from designdesk.models.client import Client
from designdesk.models.lead import Lead
from designdesk.models.project import Project
from designdesk.models.proposal import Proposal
from designdesk.models.moodboard import Moodboard
from designdesk.models.estimate import Estimate
from designdesk.models.activity import Activity

# Entity kind -> model, shared by both storage backends
ENTITY_MODELS = {
    "user": User,
    "client": Client,
    "lead": Lead,
    "project": Project,
    "proposal": Proposal,
    "moodboard": Moodboard,
    "estimate": Estimate,
    "activity": Activity,
}

# Export all models
__all__ = [
    "BaseModel",
    "User",
    "Client",
    "Lead",
    "Project",
    "Proposal",
    "Moodboard",
    "Estimate",
    "Activity",
    "ENTITY_MODELS",
]
