"""
Enquiry inbox endpoint.

GET /api/enquiries: filtered, deduplicated business enquiries from both
mailboxes. Always answers 200; failures show up as ``live: false`` and an
empty list.
"""

from fastapi import APIRouter, Depends

from command_centre.enquiries.pipeline import EnquiryPipeline

router = APIRouter(prefix="/api")


def get_enquiry_pipeline() -> EnquiryPipeline:
    return EnquiryPipeline.from_settings()


@router.get("/enquiries")
async def list_enquiries(pipeline: EnquiryPipeline = Depends(get_enquiry_pipeline)):
    """Newest-first enquiries (at most 20) plus per-mailbox connectivity."""
    result = await pipeline.run()
    return result.to_dict()
