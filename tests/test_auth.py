"""
Registro, login y validacion del token Bearer.
"""

from datetime import timedelta

import pytest
from jose import jwt

from agrokit.core.config import DEFAULT_SECRET_KEY, Settings
from agrokit.core.errors import Forbidden
from agrokit.core.security import emitir_token, leer_token
from agrokit.services.credenciales import verificar_token


class TestRegistro:
    """POST /api/auth/register."""

    def test_registra_usuario_nuevo(self, client):
        r = client.post("/api/auth/register", json={"username": "luis", "password": "pw-luis"})
        assert r.status_code == 200
        assert r.json() == {"msg": "Usuario registrado"}

    def test_usuario_duplicado_es_conflicto(self, client):
        body = {"username": "luis", "password": "pw-luis"}
        assert client.post("/api/auth/register", json=body).status_code == 200

        r = client.post("/api/auth/register", json={"username": "luis", "password": "otra"})
        assert r.status_code == 400
        assert r.json()["detail"] == "Usuario ya existe"

        # la contraseña original sigue valiendo
        assert client.post("/api/auth/login", json=body).status_code == 200

    @pytest.mark.parametrize("body", [{}, {"username": "luis"}, {"password": "x"}, {"username": "", "password": "x"}])
    def test_faltan_campos(self, client, body):
        r = client.post("/api/auth/register", json=body)
        assert r.status_code == 400
        assert r.json()["detail"] == "Faltan datos"

    def test_password_no_se_guarda_en_claro(self, client):
        from agrokit.models.usuario import Usuario

        client.post("/api/auth/register", json={"username": "luis", "password": "pw-luis"})
        with client.app.state.store.session() as db:
            usuario = db.query(Usuario).filter(Usuario.username == "luis").one()
            assert usuario.password_hash != "pw-luis"
            assert usuario.password_hash.startswith("$2")

    def test_username_y_password_numericos(self, client):
        """Formularios que mandan numeros sin comillas."""
        r = client.post("/api/auth/register", json={"username": 1234, "password": 5678})
        assert r.status_code == 200

        r = client.post("/api/auth/login", json={"username": "1234", "password": "5678"})
        assert r.status_code == 200
        assert jwt.get_unverified_claims(r.json()["token"])["username"] == "1234"


class TestLogin:
    """POST /api/auth/login."""

    def test_devuelve_token_con_identidad(self, client, settings):
        client.post("/api/auth/register", json={"username": "luis", "password": "pw-luis"})
        r = client.post("/api/auth/login", json={"username": "luis", "password": "pw-luis"})
        assert r.status_code == 200

        claims = jwt.decode(r.json()["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert claims["username"] == "luis"
        assert claims["sub"] == str(claims["id"])
        assert claims["exp"] - claims["iat"] == 12 * 60 * 60

    def test_password_incorrecta(self, client):
        client.post("/api/auth/register", json={"username": "luis", "password": "pw-luis"})
        r = client.post("/api/auth/login", json={"username": "luis", "password": "mala"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Credenciales inválidas"

    def test_usuario_desconocido(self, client):
        r = client.post("/api/auth/login", json={"username": "nadie", "password": "x"})
        assert r.status_code == 401

    def test_faltan_campos(self, client):
        r = client.post("/api/auth/login", json={"username": "luis"})
        assert r.status_code == 400


class TestToken:
    """Emision y verificacion del token."""

    def setup_method(self):
        self.settings = Settings(SECRET_KEY="clave-de-pruebas")

    def test_forma_de_los_claims(self):
        claims = jwt.decode(
            emitir_token(self.settings, 7, "ana"),
            "clave-de-pruebas",
            algorithms=["HS256"],
        )
        assert set(claims) == {"sub", "id", "username", "iat", "exp"}
        assert claims["sub"] == "7"
        assert claims["id"] == 7

    def test_token_valido_devuelve_claims(self):
        claims = verificar_token(self.settings, emitir_token(self.settings, 7, "ana"))
        assert claims["id"] == 7
        assert claims["username"] == "ana"

    def test_token_vencido_es_prohibido(self):
        token = emitir_token(self.settings, 7, "ana", expires_delta=timedelta(seconds=-5))
        with pytest.raises(Forbidden):
            verificar_token(self.settings, token)

    def test_firma_ajena_es_prohibida(self):
        otro = Settings(SECRET_KEY="otra-clave")
        with pytest.raises(Forbidden):
            verificar_token(self.settings, emitir_token(otro, 7, "ana"))

    def test_basura_es_prohibida(self):
        with pytest.raises(Forbidden):
            verificar_token(self.settings, "no-es-un-jwt")

    def test_token_sin_identidad_no_se_acepta(self):
        """Firmado con la clave correcta pero sin id ni username."""
        token = jwt.encode({"sub": "7"}, "clave-de-pruebas", algorithm="HS256")
        assert leer_token(self.settings, token) is None
        with pytest.raises(Forbidden):
            verificar_token(self.settings, token)


class TestConfigSecreto:
    """De donde sale la clave de firma."""

    def test_jwt_secret_del_entorno(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)
        monkeypatch.setenv("JWT_SECRET", "secreto-del-despliegue")
        assert Settings(_env_file=None).SECRET_KEY == "secreto-del-despliegue"

    def test_secret_key_sigue_funcionando(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.setenv("SECRET_KEY", "otro-secreto")
        assert Settings(_env_file=None).SECRET_KEY == "otro-secreto"

    def test_jwt_secret_tiene_prioridad(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "gana")
        monkeypatch.setenv("SECRET_KEY", "pierde")
        assert Settings(_env_file=None).SECRET_KEY == "gana"

    def test_sin_variables_usa_el_secreto_por_defecto(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.delenv("SECRET_KEY", raising=False)
        settings = Settings(_env_file=None)
        assert settings.SECRET_KEY == DEFAULT_SECRET_KEY
        assert settings.usa_secreto_por_defecto

    def test_token_firmado_con_jwt_secret(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "secreto-del-despliegue")
        settings = Settings(_env_file=None)
        token = emitir_token(settings, 1, "ana")
        assert jwt.decode(token, "secreto-del-despliegue", algorithms=["HS256"])["username"] == "ana"


class TestEndpointsProtegidos:
    """Token Bearer en /api/agrokits y /api/download."""

    @pytest.mark.parametrize("path", ["/api/agrokits", "/api/download/KIT1"])
    def test_sin_token_es_no_autorizado(self, client, path):
        r = client.get(path)
        assert r.status_code == 401
        assert r.json()["detail"] == "No token"

    @pytest.mark.parametrize("path", ["/api/agrokits", "/api/download/KIT1"])
    def test_token_invalido_es_prohibido(self, client, path):
        r = client.get(path, headers={"Authorization": "Bearer basura"})
        assert r.status_code == 403
        assert r.json()["detail"] == "Token inválido"

    def test_token_vencido_es_prohibido(self, client, settings):
        token = emitir_token(settings, 1, "ana", expires_delta=timedelta(seconds=-5))
        r = client.get("/api/agrokits", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 403

    def test_token_valido_es_aceptado(self, client, auth_headers):
        r = client.get("/api/agrokits", headers=auth_headers)
        assert r.status_code == 200
        assert r.json() == []
