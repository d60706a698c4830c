"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
"""
import enum
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.sql import func

from app.database import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class MilestoneIcon(str, enum.Enum):
    """Icons available for historical milestones."""
    FLAG = "Flag"
    USERS = "Users"
    AWARD = "Award"
    CALENDAR = "Calendar"


class ValueIcon(str, enum.Enum):
    """Icons available for shield values."""
    AWARD = "Award"
    SHIELD = "ShieldIcon"
    STAR = "Star"
    FLAG = "Flag"
    TARGET = "Target"
    HEART = "Heart"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


SITE_CONFIG_DEFAULTS = {
    "site_name": "Cuerpo de Banderas",
    "site_subtitle": "Liceo de Costa Rica",
    "hero_description": (
        "Honor, disciplina y patriotismo. Formando jóvenes costarricenses con pasos "
        "chilenos adaptados a nuestra cultura nacional."
    ),
    "logo_url": None,
    "logo_s3_key": None,
    "favicon_url": None,
    "favicon_s3_key": None,
    "contact_email": "cuerpo.banderas@liceocostarica.ed.cr",
    "contact_phone": "+506 2221-9358",
    "address": "Liceo de Costa Rica\nAvenida 6, Calle 7-9\nSan José, Costa Rica",
    "training_schedule": "Martes y Jueves, 2:00 PM - 4:00 PM",
    "training_location": "Patio principal del Liceo",
    "ceremonies_schedule": "Fechas patrias y eventos institucionales",
    "ceremonies_notes": "Se coordinan con anticipación",
    "meetings_schedule": "Viernes, 3:00 PM - 4:00 PM",
    "meetings_location": "Aula de coordinación",
    "admission_requirements": [
        "Ser estudiante activo del Liceo de Costa Rica",
        "Mantener promedio académico mínimo de 80",
        "Disponibilidad para entrenamientos regulares",
        "Compromiso con los valores institucionales",
        "Participación en ceremonias patrias",
    ],
    "footer_description": (
        "Formando jóvenes costarricenses con valores patrióticos, disciplina y honor "
        "desde 1951. Una tradición de más de 70 años al servicio de la patria."
    ),
    "mission_statement": (
        "Formar estudiantes con valores patrióticos, disciplina militar y amor por Costa "
        "Rica, manteniendo viva la tradición de honor que nos ha caracterizado por más "
        "de siete décadas."
    ),
    "leadership_title": "Tradición de Liderazgo",
    "leadership_description": (
        "Desde 1951, el Cuerpo de Banderas ha sido dirigido por estudiantes excepcionales "
        "que han demostrado los más altos estándares de disciplina, patriotismo y liderazgo."
    ),
    "leadership_image_url": None,
    "leadership_image_s3_key": None,
    "founding_year": 1951,
}


class SiteConfig(Base):
    """
    Singleton site configuration row.
    Text defaults mirror SITE_CONFIG_DEFAULTS so a fresh row matches the
    defaulted object served before the first save.
    """
    __tablename__ = "site_config"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    site_name = Column(Text, nullable=False, default=SITE_CONFIG_DEFAULTS["site_name"])
    site_subtitle = Column(Text, nullable=False, default=SITE_CONFIG_DEFAULTS["site_subtitle"])
    hero_description = Column(Text, default=SITE_CONFIG_DEFAULTS["hero_description"])
    logo_url = Column(Text, nullable=True)
    logo_s3_key = Column(Text, nullable=True)
    favicon_url = Column(Text, nullable=True)
    favicon_s3_key = Column(Text, nullable=True)
    contact_email = Column(Text, default=SITE_CONFIG_DEFAULTS["contact_email"])
    contact_phone = Column(Text, default=SITE_CONFIG_DEFAULTS["contact_phone"])
    address = Column(Text, default=SITE_CONFIG_DEFAULTS["address"])
    training_schedule = Column(Text, default=SITE_CONFIG_DEFAULTS["training_schedule"])
    training_location = Column(Text, default=SITE_CONFIG_DEFAULTS["training_location"])
    ceremonies_schedule = Column(Text, default=SITE_CONFIG_DEFAULTS["ceremonies_schedule"])
    ceremonies_notes = Column(Text, default=SITE_CONFIG_DEFAULTS["ceremonies_notes"])
    meetings_schedule = Column(Text, default=SITE_CONFIG_DEFAULTS["meetings_schedule"])
    meetings_location = Column(Text, default=SITE_CONFIG_DEFAULTS["meetings_location"])
    admission_requirements = Column(
        JSON, default=lambda: list(SITE_CONFIG_DEFAULTS["admission_requirements"])
    )
    footer_description = Column(Text, default=SITE_CONFIG_DEFAULTS["footer_description"])
    mission_statement = Column(Text, default=SITE_CONFIG_DEFAULTS["mission_statement"])
    leadership_title = Column(Text, default=SITE_CONFIG_DEFAULTS["leadership_title"])
    leadership_description = Column(Text, default=SITE_CONFIG_DEFAULTS["leadership_description"])
    leadership_image_url = Column(Text, nullable=True)
    leadership_image_s3_key = Column(Text, nullable=True)
    founding_year = Column(Integer, nullable=False, default=SITE_CONFIG_DEFAULTS["founding_year"])
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class LeadershipPeriod(Base):
    """Jefatura: the student leaders of a given year."""
    __tablename__ = "leadership_periods"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    year = Column(Text, nullable=False)
    jefatura = Column(Text, nullable=False)
    segunda_voz = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    image_s3_key = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Shield(Base):
    """
    Ceremonial shield (escudo).
    At most one row may be the main shield; the partial unique index backs
    the transactional flag clearing done by the service.
    """
    __tablename__ = "shields"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=False)
    image_s3_key = Column(Text, nullable=True)
    symbolism = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    is_main_shield = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index(
            "uq_shields_single_main",
            "is_main_shield",
            unique=True,
            postgresql_where=text("is_main_shield"),
            sqlite_where=text("is_main_shield = 1"),
        ),
    )


class ShieldValue(Base):
    __tablename__ = "shield_values"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    icon_name = Column(
        Enum(ValueIcon, native_enum=False, values_callable=_enum_values, length=20),
        nullable=False,
        default=ValueIcon.AWARD,
    )
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class GalleryCategory(Base):
    __tablename__ = "gallery_categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(Text, nullable=False, unique=True)
    slug = Column(Text, nullable=False, unique=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class GalleryItem(Base):
    """
    Gallery photo with an optional thumbnail.
    Items belong to at most one category and go away with it.
    """
    __tablename__ = "gallery_items"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=False)
    image_s3_key = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    thumbnail_s3_key = Column(Text, nullable=True)
    category_id = Column(
        String(36),
        ForeignKey("gallery_categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    year = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class HistoricalMilestone(Base):
    __tablename__ = "historical_milestones"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    year = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    icon_name = Column(
        Enum(MilestoneIcon, native_enum=False, values_callable=_enum_values, length=20),
        nullable=False,
        default=MilestoneIcon.FLAG,
    )
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class HistoricalImage(Base):
    __tablename__ = "historical_images"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=False)
    image_s3_key = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class User(Base):
    """
    Portal user.
    config_step is kept as a string column; UserMapper converts it to int.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)
    user_name = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    config_step = Column(String(10), nullable=False, default="0")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
