"""Record factories shared by the test modules."""
from revastudio.infrastructure.repositories import UserRepository

# Payload with a JPEG signature
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 64


def make_user(user_repo: UserRepository, **overrides) -> dict:
    """Create a regular essencial-plan user, with optional field overrides."""
    data = {
        "email": "ana@example.com",
        "password": "secret1",
        "name": "Ana Souza",
        "role": "user",
        "plan": "essencial",
        "cpf": "123.456.789-00",
        "endereco": "Rua A, 1",
        "telefone": "27 99999-0000",
        "planType": "mensal",
        "paymentMethod": "pix",
        "accountStatus": "ativo",
    }
    data.update(overrides)
    return user_repo.create(data)


def signup_form(**overrides) -> dict:
    """Valid signup/admin form data."""
    data = {
        "name": "Bruno Lima",
        "email": "bruno@example.com",
        "password": "secret1",
        "cpf": "987.654.321-00",
        "endereco": "Rua B, 2",
        "telefone": "27 98888-1111",
        "plan": "pro",
        "planType": "anual",
        "paymentMethod": "cartao",
    }
    data.update(overrides)
    return data
