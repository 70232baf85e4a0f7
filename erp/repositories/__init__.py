from . import party_repository as party_repo
from . import ledger_repository as ledger_repo
from . import payment_repository as payment_repo
from . import product_repository as product_repo
from . import document_repository as document_repo
from . import sequence_repository as sequence_repo

__all__ = [
    "party_repo", "ledger_repo", "payment_repo",
    "product_repo", "document_repo", "sequence_repo",
]
