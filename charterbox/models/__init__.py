"""MongoDB document models for CharterBox."""

from charterbox.models.agent import Agent
from charterbox.models.lead import Lead
from charterbox.models.sales_lead import SalesLead
from charterbox.models.user import User
from charterbox.models.yacht import Yacht, YachtPackage

__all__ = [
    # Main documents
    "Lead",
    "SalesLead",
    # Reference data documents
    "Agent",
    "Yacht",
    "User",
    # Embedded subdocuments
    "YachtPackage",
]
