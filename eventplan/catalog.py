"""Read side of the assignment template catalog."""
from .models import AssignmentTemplate


def normalize_tags(tags):
    """Turn a tag string or iterable into a set of stripped, non-empty tags.

    A single string is treated as one tag; the template import splits
    comma-separated cells itself.
    """
    if tags is None:
        return frozenset()
    if isinstance(tags, str):
        tags = [tags]
    return frozenset(str(tag).strip() for tag in tags if str(tag).strip())


def tags_match(project_tags, template_tags):
    """A template matches when it carries every one of the project's tags."""
    return normalize_tags(project_tags) <= normalize_tags(template_tags)


class TemplateCatalog:

    def __init__(self, templates=None):
        self.templates = templates

    def all(self):
        if self.templates is None:
            return AssignmentTemplate.objects.all()
        return self.templates

    def find_matching_templates(self, project_tags):
        wanted = normalize_tags(project_tags)
        return [
            template for template in self.all()
            if tags_match(wanted, template.tags)
        ]

    def get(self, template_id):
        if self.templates is None:
            return AssignmentTemplate.objects.filter(id=template_id).first()
        return next((t for t in self.templates if t.id == template_id), None)
