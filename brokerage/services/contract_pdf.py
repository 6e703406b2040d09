"""PDF rendering of contract packets with ReportLab."""

from __future__ import annotations

import logging
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from brokerage.services.contract_packet import ContractPacket, format_date, format_money
from brokerage.utils.validators import escape_html

logger = logging.getLogger(__name__)

_HEADER_COLOR = colors.HexColor("#2C3E50")
_ACCENT_COLOR = colors.HexColor("#3498DB")


def _table(rows: list[list[str]], col_widths: list[float]) -> Table:
    table = Table(rows, colWidths=col_widths)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    return table


def render_contract_pdf(packet: ContractPacket) -> bytes:
    """Render the packet to PDF bytes; any failure yields ``b""``."""
    try:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=inch,
            leftMargin=inch,
            topMargin=inch,
            bottomMargin=inch,
            title=packet.subject,
        )
        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "PacketTitle",
            parent=styles["Heading1"],
            fontSize=20,
            textColor=_HEADER_COLOR,
            spaceAfter=18,
            alignment=TA_CENTER,
        )

        elements = [
            Paragraph(escape_html(packet.subject), title_style),
            Paragraph(
                f"{escape_html(packet.property_title)}<br/>{escape_html(packet.property_address)}",
                styles["Normal"],
            ),
            Spacer(1, 0.25 * inch),
            Paragraph("Parties", styles["Heading2"]),
            _table(
                [
                    ["Buyer", packet.buyer.name],
                    ["Buyer email", packet.buyer.email or "N/A"],
                    ["Agent", packet.agent_name or "Unassigned"],
                ],
                [2 * inch, 4.5 * inch],
            ),
            Spacer(1, 0.2 * inch),
            Paragraph("Financial terms", styles["Heading2"]),
            _table(
                [
                    ["List price", format_money(packet.list_price)],
                    ["Purchase price", format_money(packet.purchase_price)],
                    ["Financing", packet.financing_type or "N/A"],
                    ["Earnest money", format_money(packet.earnest_money)],
                    ["Proposed close date", format_date(packet.proposed_close_date)],
                ],
                [2 * inch, 4.5 * inch],
            ),
            Spacer(1, 0.2 * inch),
            Paragraph("Key deadlines", styles["Heading2"]),
        ]

        deadline_table = _table(
            [["Milestone", "Due date"]] + [[name, format_date(due)] for name, due in packet.deadlines],
            [3.25 * inch, 3.25 * inch],
        )
        deadline_table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), _ACCENT_COLOR),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ]))
        elements.append(deadline_table)
        elements.append(Spacer(1, 0.2 * inch))

        elements.append(Paragraph("Commission disclosure", styles["Heading2"]))
        elements.append(_table(
            [
                [f"Broker ({packet.broker_pct}%)", format_money(packet.commission.broker_amount)],
                [f"Agent ({packet.agent_pct}%)", format_money(packet.commission.agent_amount)],
            ],
            [2 * inch, 4.5 * inch],
        ))
        elements.append(Spacer(1, 0.3 * inch))

        footer_style = ParagraphStyle(
            "PacketFooter",
            parent=styles["Normal"],
            fontSize=8,
            textColor=colors.grey,
        )
        for clause in packet.clauses:
            elements.append(Paragraph(escape_html(clause), footer_style))

        doc.build(elements)
        return buffer.getvalue()
    except Exception:
        logger.exception(
            "contract_pdf.render_failed",
            extra={"event": "contract_pdf.render_failed", "deal_id": packet.deal_id},
        )
        return b""
