"""
mongo_init - one-shot MongoDB provisioning for the vector store.
"""
from mongo_init.errors import DatabaseNotReadyError, ProvisionError
from mongo_init.provisioner import ProvisionResult, provision

__all__ = [
    "provision",
    "ProvisionResult",
    "ProvisionError",
    "DatabaseNotReadyError",
]
