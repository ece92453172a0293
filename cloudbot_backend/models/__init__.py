from cloudbot_backend.models.linked_accounts import LinkedAccount, LinkedAccountUpsert, SecretBundle

__all__ = [
    "LinkedAccount",
    "LinkedAccountUpsert",
    "SecretBundle",
]
