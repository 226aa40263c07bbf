from .user import UserCreate, UserLogin, UserOut, EmployeeBasic
from .tokens import SessionOut
from .department import DepartmentCreate, DepartmentUpdate, DepartmentOut
from .task import TaskCreate, TaskUpdate, TaskOut
