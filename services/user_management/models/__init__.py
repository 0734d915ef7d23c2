from .super_admin import SuperAdmin
from .schools import School, SchoolAdmin
from .users import SchoolUser, SchoolUserRole
