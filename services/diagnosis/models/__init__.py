from .campuses import DiagnosisCampus
from .courses import DiagnosisCourse
from .genres import DiagnosisGenre
from .lifestyles import DiagnosisLifestyle
from .instructors import DiagnosisInstructor, InstructorCampus, InstructorCourse, InstructorGenre
from .schedule import DiagnosisScheduleSlot, ScheduleSlotCourse, WEEKDAYS
from .results import DiagnosisResult, ResultGenre, ResultCampus
from .forms import DiagnosisForm, DiagnosisFormField, DiagnosisFormEmailSetting, FormFieldType
