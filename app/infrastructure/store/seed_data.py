from __future__ import annotations

from decimal import Decimal

from app.domain.entities.professional import Professional
from app.domain.entities.service_offering import ServiceOffering

DEMO_PROFESSIONALS: tuple[Professional, ...] = (
    Professional(id="1", name="Maria Silva", specialty="Cabelo, Escova, Corte", avatar_url="/placeholder.svg"),
    Professional(id="2", name="João Santos", specialty="Barba, Corte Masculino, Bigode", avatar_url="/placeholder.svg"),
    Professional(id="3", name="Ana Costa", specialty="Coloração, Luzes, Tratamentos", avatar_url="/placeholder.svg"),
)

DEMO_SERVICES: tuple[ServiceOffering, ...] = (
    ServiceOffering(id="1", name="Corte Feminino", duration_minutes=60, price=Decimal("45"), professional_id="1"),
    ServiceOffering(id="2", name="Escova", duration_minutes=45, price=Decimal("35"), professional_id="1"),
    ServiceOffering(id="3", name="Corte Masculino", duration_minutes=30, price=Decimal("25"), professional_id="2"),
    ServiceOffering(id="4", name="Barba", duration_minutes=20, price=Decimal("15"), professional_id="2"),
    ServiceOffering(id="5", name="Coloração", duration_minutes=120, price=Decimal("80"), professional_id="3"),
    ServiceOffering(id="6", name="Luzes", duration_minutes=180, price=Decimal("120"), professional_id="3"),
)
