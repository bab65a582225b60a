"""Plain-text order summary shared by every order notification."""

from datetime import datetime

from merchflow.order.hydration import OrderDetail


def format_timestamp(value: datetime) -> str:
    """``17 Oct 2026 14:05 +05:30`` style; naive values are shown without offset."""
    text = value.strftime("%d %b %Y %H:%M")
    offset = value.utcoffset()
    if offset is None:
        return text
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{text} {sign}{hours:02d}:{minutes:02d}"


def order_summary(intro: str, order: OrderDetail) -> str:
    lines = [intro, "", f"Order ID: {order.id}", f"Status: {order.status}"]

    if order.approval is not None:
        lines.append(f"Approver: {order.approval.approver_username}")

    lines.append(f"Placed By: {order.username or 'Unknown'}")
    lines.append(f"Shipping Address: {order.shipping_address or 'Not provided'}")
    if order.delivery_address:
        lines.append(f"Delivery Address: {order.delivery_address}")

    if order.courier_info is not None:
        lines.append(f"Courier: {order.courier_info.courier_name}")
        lines.append(f"Tracking #: {order.courier_info.tracking_number}")
        if order.courier_info.dispatch_date is not None:
            lines.append(f"Dispatch Date: {format_timestamp(order.courier_info.dispatch_date)}")

    lines.extend(["", "Items:"])
    lines.extend(
        f"- {item.product_name} x{item.quantity} @ {item.unit_price} = {item.line_total}" for item in order.items
    )

    lines.extend(["", f"Total: {order.total_amount}"])

    if order.approval is not None and order.approval.comments and order.approval.comments.strip():
        lines.append(f"Approver Comments: {order.approval.comments}")

    return "\n".join(lines)
