from app.crud.crud_user import user
from app.crud.crud_project import project
from app.crud.crud_bug import bug
