"""RBAC Admin CLI tool (rbacctl)."""

import typer

app = typer.Typer(name="rbacctl", help="RBAC Admin CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


def _mysql_params():
    from sqlalchemy.engine import make_url
    from rbac_admin.core.config import settings

    url = make_url(settings.MYSQL_URL)
    return url.database, {
        "host": url.host or "localhost",
        "port": url.port or 3306,
        "user": url.username,
        "password": url.password or "",
    }


@db_app.command("create")
def db_create():
    """Create the MySQL database if it doesn't exist."""
    import pymysql

    db_name, params = _mysql_params()
    conn = pymysql.connect(**params)
    try:
        cursor = conn.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        typer.echo(f"Database '{db_name}' created (or already exists)")
    finally:
        conn.close()


@db_app.command("init")
def db_init():
    """Create all tables."""
    from rbac_admin.db.session import create_tables

    create_tables()
    typer.echo("Tables created")


@db_app.command("seed")
def db_seed():
    """Seed the permission catalogue and default roles."""
    from rbac_admin.db.session import SessionLocal
    from rbac_admin.db.seeds.seed_permissions import seed_permissions, seed_roles

    db = SessionLocal()
    try:
        seed_permissions(db)
        seed_roles(db)
    finally:
        db.close()
    typer.echo("All seeds applied")


@app.command("audit")
def audit(
    role_id: int = typer.Option(None, help="Only entries for this role"),
    actor_id: int = typer.Option(None, help="Only entries by this user"),
    action: str = typer.Option(None, help="e.g. role.created"),
):
    """Show the role audit trail, newest first."""
    from rbac_admin.db.session import SessionLocal
    from rbac_admin.services.audit_service import audit_service

    db = SessionLocal()
    try:
        logs = audit_service.query_logs(
            db, actor_id=actor_id, action=action,
            resource_type="role", resource_id=role_id,
        )
        for log in logs:
            typer.echo(
                f"  {log.created_at} {log.action} role={log.resource_id} "
                f"by={log.actor_email or log.actor_id}"
            )
        if not logs:
            typer.echo("No audit entries")
    finally:
        db.close()


@app.command("token")
def token(
    user_id: int = typer.Argument(..., help="Actor user id (the token subject)"),
    email: str = typer.Option(None, help="Actor e-mail"),
    minutes: int = typer.Option(None, help="Lifetime in minutes"),
):
    """Mint a development access token for the mutating endpoints."""
    from datetime import timedelta
    from rbac_admin.core.security import create_access_token

    data = {"sub": str(user_id)}
    if email:
        data["email"] = email
    expires = timedelta(minutes=minutes) if minutes else None
    typer.echo(create_access_token(data, expires))


@app.command("list-roles")
def list_roles():
    """List all roles via the API."""
    import httpx
    from rbac_admin.core.config import settings

    resp = httpx.get(f"{settings.API_URL}/roles")
    data = resp.json()
    if data.get("error"):
        typer.echo(f"{data['error']['codigo']}: {data['error']['mensaje']}", err=True)
        raise typer.Exit(1)
    for item in data.get("respuesta") or []:
        r = item["Roles"]
        typer.echo(f"  [{r['IdRol']}] {r['Rol']} - {r['Descripcion']}")


@app.command("create-role")
def create_role(
    name: str = typer.Argument(..., help="Role name"),
    description: str = typer.Option(None, help="Role description"),
    token: str = typer.Option(..., envvar="RBAC_TOKEN", help="Access token"),
):
    """Create a role via the API."""
    import httpx
    from rbac_admin.core.config import settings

    role = {"Rol": name}
    if description:
        role["Descripcion"] = description
    resp = httpx.post(
        f"{settings.API_URL}/roles/crear",
        json={"Roles": role},
        headers={"Authorization": f"Bearer {token}"},
    )
    typer.echo(resp.json())


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload"),
):
    """Start the FastAPI server."""
    import uvicorn
    uvicorn.run("rbac_admin.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
