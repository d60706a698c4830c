"""
HTML email templates (Spanish and English).
"""
from typing import List, Tuple

WELCOME_TEXT = {
    "es": {
        "subject": "¡Bienvenido al Cuerpo de Banderas - Liceo de Costa Rica!",
        "title": "¡Bienvenido al Cuerpo de Banderas!",
        "greeting": "¡Hola",
        "message": (
            "¡Gracias por unirte al portal institucional del Cuerpo de Banderas del Liceo de "
            "Costa Rica! Estamos emocionados de tenerte como parte de nuestra comunidad que "
            "honra la tradición iniciada en 1951."
        ),
        "features_title": "Qué puedes hacer en nuestro portal",
        "features": [
            ("Historia Institucional", "Explora nuestra rica historia y tradiciones desde 1951"),
            ("Galería de Ceremonias", "Revive los momentos más importantes de nuestras ceremonias"),
            ("Jefaturas Históricas", "Conoce a los líderes que han guiado nuestra organización"),
            ("Escudos Ceremoniales", "Descubre el simbolismo de nuestros escudos tradicionales"),
        ],
        "cta": "Explorar Portal",
        "footer": "Cuerpo de Banderas - Liceo de Costa Rica",
    },
    "en": {
        "subject": "Welcome to Cuerpo de Banderas - Liceo de Costa Rica!",
        "title": "Welcome to Cuerpo de Banderas!",
        "greeting": "Hello",
        "message": (
            "Thank you for joining the institutional portal of Cuerpo de Banderas from Liceo "
            "de Costa Rica! We're excited to have you as part of our community that honors "
            "the tradition started in 1951."
        ),
        "features_title": "What you can do on our portal",
        "features": [
            ("Institutional History", "Explore our rich history and traditions since 1951"),
            ("Ceremony Gallery", "Relive the most important moments of our ceremonies"),
            ("Historical Leadership", "Meet the leaders who have guided our organization"),
            ("Ceremonial Shields", "Discover the symbolism of our traditional shields"),
        ],
        "cta": "Explore Portal",
        "footer": "Cuerpo de Banderas - Liceo de Costa Rica",
    },
}

INVITE_TEXT = {
    "es": {
        "subject": "Invitación para unirte a {organization} en Cuerpo de Banderas",
        "title": "¡Has sido invitado!",
        "greeting": "¡Hola",
        "message": (
            "Has sido invitado a unirte a {organization} en el portal del Cuerpo de Banderas. "
            "Esta invitación te permitirá acceder a las secciones administrativas del portal."
        ),
        "roles_label": "Rol asignado",
        "roles_label_plural": "Roles asignados",
        "cta": "Aceptar Invitación",
        "footer": "Cuerpo de Banderas - Liceo de Costa Rica",
    },
    "en": {
        "subject": "Invitation to join {organization} on Cuerpo de Banderas",
        "title": "You've been invited!",
        "greeting": "Hello",
        "message": (
            "You have been invited to join {organization} on the Cuerpo de Banderas portal. "
            "This invitation will give you access to the administrative sections of the portal."
        ),
        "roles_label": "Assigned role",
        "roles_label_plural": "Assigned roles",
        "cta": "Accept Invitation",
        "footer": "Cuerpo de Banderas - Liceo de Costa Rica",
    },
}


def _layout(language: str, title: str, body: str, footer: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="{language}">
<head><meta charset="UTF-8"><title>{title}</title></head>
<body style="font-family: Arial, sans-serif; background:#f4f4f4; margin:0; padding:24px;">
  <div style="max-width:600px; margin:0 auto; background:#ffffff; border-radius:8px; overflow:hidden;">
    <div style="background:#002b7f; color:#ffffff; padding:24px; text-align:center;">
      <h1 style="margin:0;">{title}</h1>
    </div>
    <div style="padding:24px; color:#333333;">
      {body}
    </div>
    <div style="background:#ce1126; color:#ffffff; padding:12px; text-align:center; font-size:12px;">
      {footer}
    </div>
  </div>
</body>
</html>"""


def _button(url: str, label: str) -> str:
    return (
        f'<p style="text-align:center;"><a href="{url}" style="background:#002b7f; color:#ffffff; '
        f'padding:12px 24px; border-radius:4px; text-decoration:none;">{label}</a></p>'
    )


def render_welcome_email(full_name: str, language: str, frontend_url: str) -> Tuple[str, str]:
    """Returns (subject, html)."""
    text = WELCOME_TEXT.get(language, WELCOME_TEXT["es"])
    features = "".join(
        f"<li><strong>{name}</strong>: {description}</li>" for name, description in text["features"]
    )
    setup_url = frontend_url.rstrip("/") + "/"
    body = (
        f"<p>{text['greeting']} {full_name}!</p>"
        f"<p>{text['message']}</p>"
        f"<h3>{text['features_title']}</h3><ul>{features}</ul>"
        f"{_button(setup_url, text['cta'])}"
    )
    return text["subject"], _layout(language, text["title"], body, text["footer"])


def render_invite_email(
    full_name: str,
    organization: str,
    roles: List[str],
    accept_url: str,
    language: str,
) -> Tuple[str, str]:
    """Returns (subject, html)."""
    text = INVITE_TEXT.get(language, INVITE_TEXT["es"])
    roles_label = text["roles_label_plural"] if len(roles) > 1 else text["roles_label"]
    body = (
        f"<p>{text['greeting']} {full_name}!</p>"
        f"<p>{text['message'].format(organization=organization)}</p>"
        f"<p><strong>{roles_label}:</strong> {', '.join(roles)}</p>"
        f"{_button(accept_url, text['cta'])}"
    )
    subject = text["subject"].format(organization=organization)
    return subject, _layout(language, text["title"], body, text["footer"])
