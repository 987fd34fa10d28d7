from retail_credit.infra.db.models.base import Base
from retail_credit.infra.db.models.collaborators import ClientRow, SaleRow
from retail_credit.infra.db.models.credit import CreditRow, InstallmentRow

__all__ = ["Base", "ClientRow", "CreditRow", "InstallmentRow", "SaleRow"]
