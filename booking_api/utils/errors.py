class BookingError(Exception):
    """Base class for booking workflow errors."""


class NotFoundError(BookingError):
    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__("Booking not found")


class ValidationError(BookingError):
    def __init__(self, messages):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class OperationNotPermittedError(BookingError):
    pass


class ScheduleConflictError(BookingError):
    def __init__(self, room_id: str, conflict_count: int):
        self.room_id = room_id
        self.conflict_count = conflict_count
        super().__init__(
            f"Room {room_id} is not available for the selected time slot: "
            f"{conflict_count} conflicting booking(s)"
        )
