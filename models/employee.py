class Employee:
    """hr.employee row linked to the logged-in Odoo user."""

    FIELDS = ["id", "name", "job_title", "department_id", "work_email"]

    def __init__(self, id, name, job_title=None, department=None, work_email=None):
        self.id = id
        self.name = name
        self.job_title = job_title
        self.department = department
        self.work_email = work_email

    @staticmethod
    def from_odoo(row):
        department = row.get("department_id")
        if isinstance(department, (list, tuple)):
            department = department[1] if len(department) > 1 else None
        return Employee(
            id=row["id"],
            name=row.get("name") or "",
            job_title=row.get("job_title") or None,
            department=department or None,
            work_email=row.get("work_email") or None,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "job_title": self.job_title,
            "department": self.department,
            "work_email": self.work_email,
        }
