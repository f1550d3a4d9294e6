import logging

from celery import shared_task
from django.core.files.storage import default_storage

from masters.utils import parse_date_param

from .exports import gst_workbook_file

logger = logging.getLogger(__name__)


@shared_task
def export_gst_report(start, end, exclude_d=True):
    """Build the GST register for a period and store it under ``reports/``.

    Dates may be ISO strings (as passed through the broker) or dates.
    Returns the stored path.
    """
    start, end = parse_date_param(str(start)), parse_date_param(str(end))
    content = gst_workbook_file(start, end, exclude_d)
    path = default_storage.save(f"reports/{content.name}", content)
    logger.info("GST report stored at %s", path)
    return path
