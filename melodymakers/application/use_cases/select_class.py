from ..dto import InsertResult
from ...domain.entities import ClassStatus
from ...domain.errors import ClassFull, Conflict, NotFound


class IClassReader:
    def get(self, class_id: int): ...


class ISelectionRepository:
    def exists(self, student_email: str, class_id: int) -> bool: ...
    def create(self, student_email: str, class_id: int, price: float) -> InsertResult: ...


class SelectClass:
    def __init__(self, classes: IClassReader, selections: ISelectionRepository):
        self.classes = classes
        self.selections = selections

    def execute(self, student_email: str, class_id: int) -> InsertResult:
        row = self.classes.get(class_id)
        if row is None or row.status != ClassStatus.APPROVED.value:
            raise NotFound("class not found")
        if row.seats <= 0:
            raise ClassFull("no seats left in this class")
        if self.selections.exists(student_email, class_id):
            raise Conflict("class already selected")
        return self.selections.create(student_email, class_id, row.price)
