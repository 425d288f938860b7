"""Low stock alert template — operator notification for one stock record."""


class LowStockAlertTemplate:
    @staticmethod
    def context_for(record) -> dict:
        return {
            "name": record.name,
            "quantity": record.quantity,
            "threshold": record.threshold,
            "stock_record_id": str(record.id),
        }

    @staticmethod
    def render(context: dict, style: str = "text") -> dict:
        """Render the alert for a channel's message style.

        "email" gives a subject and a multi-line body; any other style gives
        a single line of text with no subject.
        """
        name = context.get("name", "N/A")
        quantity = context.get("quantity", 0)
        threshold = context.get("threshold", 0)

        if style == "email":
            return {
                "subject": f"Low Stock Alert: {name}",
                "body": (
                    f"The stock for {name} is low. Only {quantity} left.\n\n"
                    f"Alert threshold: {threshold}\n"
                    f"Record ID: {context.get('stock_record_id', 'N/A')}\n\n"
                    "Please restock as needed."
                ),
            }

        return {
            "subject": None,
            "body": f"Low Stock Alert: {name} - Only {quantity} left!",
        }
