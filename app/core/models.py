# Import all models here so they register on Base.metadata
from app.domains.listings.models import Bid, Listing
from app.domains.nfts.models import Nft
from app.domains.toolbox.models import ToolboxRow
from app.domains.transactions.models import FeedEvent, Transaction
from app.domains.users.models import User

__all__ = ["Bid", "FeedEvent", "Listing", "Nft", "ToolboxRow", "Transaction", "User"]
