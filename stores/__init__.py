from .common import DeleteResult, Page, paginate
from .users import UserFilter, CredentialStore
from .sessions import SessionStore
from .products import ProductListFilter, ProductStore
