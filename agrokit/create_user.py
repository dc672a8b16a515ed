"""
Alta administrativa de un usuario directamente sobre el snapshot.

    python -m agrokit.create_user USERNAME PASSWORD

Con el servidor apagado: el servidor reescribe el snapshot completo en cada
escritura y pisaria este cambio.
"""
import argparse
import asyncio
import sys

from agrokit.core.config import Settings
from agrokit.core.errors import Conflict
from agrokit.core.logs import configure_logging
from agrokit.db.store import SnapshotStore
from agrokit.services.credenciales import registrar_usuario


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Crear usuario de AgroKit")
    parser.add_argument("username")
    parser.add_argument("password")
    parser.add_argument("--db-file", default=None, help="snapshot a modificar (por defecto DB_FILE)")
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings.LOG_LEVEL)

    store = SnapshotStore(args.db_file or settings.DB_FILE)
    try:
        asyncio.run(registrar_usuario(store, args.username, args.password))
    except Conflict:
        print(f"El usuario {args.username} ya existe", file=sys.stderr)
        return 1
    finally:
        store.close()

    print(f"Usuario {args.username} creado en {store.db_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
