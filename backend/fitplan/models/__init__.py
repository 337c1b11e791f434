# Import all models here
from fitplan.models.account import Account
from fitplan.models.profile import Profile
from fitplan.models.session import SessionRecord
