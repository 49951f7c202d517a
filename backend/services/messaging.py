from urllib.parse import quote

WHATSAPP_BASE_URL = 'https://wa.me'


def build_booking_message(client_name: str, date: str, time: str, phone: str) -> str:
    return (
        f'Hi, I am *{client_name}*.\n'
        f'I just booked my haircut online for *{date}* at *{time}*.\n'
        f'My number is: {phone}. See you soon!'
    )


def build_message_link(number: str, message: str) -> str:
    """Deep link that opens a chat with the shop, message prefilled."""
    digits = ''.join(character for character in number if character.isdigit())
    if not digits:
        raise ValueError('Shop messaging number is not configured.')
    return f'{WHATSAPP_BASE_URL}/{digits}?text={quote(message, safe="")}'
