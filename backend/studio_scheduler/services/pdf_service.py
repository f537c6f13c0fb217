from fpdf import FPDF

from studio_scheduler.schemas.event import ScheduledEvent
from studio_scheduler.schemas.team import TeamMember
from studio_scheduler.services.reconciler import compute_counts, fulfillment_status


def _latin1(text: str) -> str:
    """Encode to latin-1, replacing unsupported chars; fpdf built-in fonts are latin-1 only."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def generate_call_sheet_pdf(event: ScheduledEvent, members: dict[str, TeamMember]) -> bytes:
    """One-page call sheet for the crew: where, when, who, and what is owed to the client."""
    pdf = FPDF()
    pdf.set_margins(20, 20, 20)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 18)
    pdf.multi_cell(0, 10, _latin1(event.name), align="L")
    pdf.ln(2)

    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(80, 80, 80)
    pdf.cell(0, 7, _latin1(f"Date: {event.date}  {event.start_time} - {event.end_time}"), ln=True)
    pdf.cell(0, 7, _latin1(f"Location: {event.location}"), ln=True)
    pdf.cell(0, 7, _latin1(f"Client: {event.client_name}  {event.client_phone}"), ln=True)
    pdf.cell(0, 7, _latin1(f"Guests: {event.guest_count}"), ln=True)
    if event.estimate_package:
        pdf.cell(0, 7, _latin1(f"Package: {event.estimate_package}"), ln=True)

    pdf.ln(3)
    pdf.set_draw_color(200, 200, 200)
    pdf.line(20, pdf.get_y(), 190, pdf.get_y())
    pdf.ln(5)

    counts = compute_counts(event)
    pdf.set_font("Helvetica", "B", 12)
    pdf.set_text_color(0, 0, 0)
    pdf.cell(0, 8, _latin1(f"Crew ({fulfillment_status(event, counts)})"), ln=True)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(
        0, 6,
        _latin1(
            f"Photographers: {counts.total_photographers}/{event.photographers_count}   "
            f"Videographers: {counts.total_videographers}/{event.videographers_count}"
        ),
        ln=True,
    )
    if not event.assignments:
        pdf.cell(0, 6, "No crew assigned yet.", ln=True)
    for assignment in event.assignments:
        member = members.get(assignment.team_member_id)
        name = member.name if member else assignment.team_member_id
        phone = f"  {member.phone}" if member and member.phone else ""
        call_time = assignment.reporting_time or event.start_time
        pdf.cell(
            0, 6,
            _latin1(f"- {name} ({assignment.role}, {assignment.status}) call {call_time}{phone}"),
            ln=True,
        )

    pdf.ln(3)
    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 8, "Deliverables", ln=True)
    pdf.set_font("Helvetica", "", 10)
    for deliverable in event.deliverables:
        label = deliverable.description or deliverable.type
        pdf.cell(0, 6, _latin1(f"- {label} [{deliverable.type}, {deliverable.status}]"), ln=True)

    if event.client_requirements:
        pdf.ln(3)
        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(0, 8, "Client Requirements", ln=True)
        pdf.set_font("Helvetica", "", 10)
        pdf.multi_cell(0, 5, _latin1(event.client_requirements))

    return bytes(pdf.output())
