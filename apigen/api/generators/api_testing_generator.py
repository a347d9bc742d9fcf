"""
Request collections for manual API testing.

Every generated project ships two descriptions of the same request plan: an
`api-tests.http` file (VS Code REST Client / JetBrains HTTP client) and a
Postman Collection v2.1 JSON document. The plan is built once from the
template context so both stay in sync with the generated routes.
"""

import json
from typing import Dict, List

from apigen.api.extractors.type_mapper import split_list_type


POSTMAN_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"

_JSON_SAMPLES = {
    "String": "test",
    "Integer": 1,
    "Long": 1,
    "Short": 1,
    "Byte": 1,
    "BigDecimal": 10.5,
    "Float": 1.5,
    "Double": 1.5,
    "Boolean": True,
    "LocalDate": "2024-01-01",
    "LocalTime": "12:00:00",
    "LocalDateTime": "2024-01-01T12:00:00",
    "UUID": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
    "Duration": "PT5M",
}


def json_sample(field: Dict):
    """A JSON-serializable example value for one entity field."""
    if field["enum_values"]:
        return field["enum_values"][0]
    if split_list_type(field["logical"]) is not None:
        return []
    value = _JSON_SAMPLES.get(field["logical"])
    if isinstance(value, str) and field["logical"] == "String" and field["length"]:
        value = value[:field["length"]]
    return value


def _key(context: Dict, field: Dict) -> str:
    return field[context["json_case"]]


def sample_body(context: Dict, entity: Dict) -> Dict:
    """Request body for create/update calls of an entity."""
    body = {}
    for field in entity["fields"] + entity["foreign_keys"]:
        if field["auto_increment"]:
            continue
        body[_key(context, field)] = json_sample(field)
    return body


def _request(name, method, path, body=None, auth=False, body_mode="json") -> Dict:
    return {
        "name": name,
        "method": method,
        "path": path,
        "body": body,
        "auth": auth,
        "body_mode": body_mode,
    }


def _auth_key(context: Dict, camel: str, snake: str) -> str:
    return snake if context["json_case"] == "snake" else camel


def build_request_plan(context: Dict) -> List[Dict]:
    """Folders of requests: auth flows first, then CRUD per entity."""
    features = context["features"]
    prefix = context["server"]["api_prefix"]
    secured = features["jwt_auth"]
    folders = []

    if secured:
        refresh_key = _auth_key(context, "refreshToken", "refresh_token")
        auth = [
            _request("Register", "POST", f"{prefix}/auth/register", {
                "username": "demo",
                "email": "demo@example.com",
                "password": "Secret123!",
            }),
            _request("Login", "POST", f"{prefix}/auth/login", {
                "username": "demo",
                "password": "Secret123!",
            }),
            _request("Refresh token", "POST", f"{prefix}/auth/refresh", {
                refresh_key: "{{refreshToken}}",
            }),
        ]
        if features["password_reset"]:
            auth.append(_request("Forgot password", "POST", f"{prefix}/auth/forgot-password", {
                "email": "demo@example.com",
            }))
            auth.append(_request("Reset password", "POST", f"{prefix}/auth/reset-password", {
                "token": "{{resetToken}}",
                _auth_key(context, "newPassword", "new_password"): "NewSecret123!",
            }))
        folders.append({"name": "Auth", "requests": auth})

    for entity in context["entities"]:
        base = f"{prefix}/{entity['resource']}"
        body = sample_body(context, entity)
        list_path = f"{base}?page=0&size=20" if features["pagination"] else base
        folders.append({
            "name": entity["name"],
            "requests": [
                _request(f"List {entity['plural']}", "GET", list_path, auth=secured),
                _request(f"Get {entity['name']}", "GET", f"{base}/1", auth=secured),
                _request(f"Create {entity['name']}", "POST", base, body, auth=secured),
                _request(f"Update {entity['name']}", "PUT", f"{base}/1", body, auth=secured),
                _request(f"Delete {entity['name']}", "DELETE", f"{base}/1", auth=secured),
            ],
        })

    if features["file_upload"]:
        folders.append({"name": "Files", "requests": [
            _request("Upload file", "POST", f"{prefix}/files", auth=secured, body_mode="file"),
        ]})
    return folders


def generate_http_requests(context: Dict, env) -> str:
    """Render api-tests.http from the shared template."""
    folders = build_request_plan(context)
    for folder in folders:
        for request in folder["requests"]:
            request["json"] = json.dumps(request["body"], indent=2) if request["body"] else None
    return env.get_template("api-tests.http.jinja").render(
        base_url=context["server"]["base_url"],
        project=context["project"],
        folders=folders,
    )


def generate_postman_collection(context: Dict) -> str:
    """Postman Collection v2.1 with one folder per request group."""
    collection = {
        "info": {
            "name": context["project"]["name"],
            "description": context["project"]["description"],
            "schema": POSTMAN_SCHEMA,
            "_postman_id": f"apigen-{context['project']['kebab']}",
        },
        "item": [
            {"name": folder["name"], "item": [_postman_item(r) for r in folder["requests"]]}
            for folder in build_request_plan(context)
        ],
        "variable": [
            {"key": "baseUrl", "value": context["server"]["base_url"], "type": "string"},
            {"key": "accessToken", "value": "", "type": "string"},
            {"key": "refreshToken", "value": "", "type": "string"},
        ],
    }
    return json.dumps(collection, indent=2) + "\n"


def _postman_item(request: Dict) -> Dict:
    path, _, query = request["path"].partition("?")
    headers = [{"key": "Content-Type", "value": "application/json", "type": "text"}]
    if request["auth"]:
        headers.append({"key": "Authorization", "value": "Bearer {{accessToken}}", "type": "text"})

    item = {
        "name": request["name"],
        "request": {
            "method": request["method"],
            "header": headers,
            "url": {
                "raw": "{{baseUrl}}" + request["path"],
                "host": ["{{baseUrl}}"],
                "path": [p for p in path.split("/") if p],
                "query": [
                    {"key": k, "value": v}
                    for k, _, v in (pair.partition("=") for pair in query.split("&") if pair)
                ],
            },
        },
        "response": [],
        "event": [{
            "listen": "test",
            "script": {"type": "text/javascript", "exec": _postman_tests(request)},
        }],
    }
    if request["body_mode"] == "file":
        item["request"]["header"] = [h for h in headers if h["key"] != "Content-Type"]
        item["request"]["body"] = {
            "mode": "formdata",
            "formdata": [{"key": "file", "type": "file", "src": "sample.txt"}],
        }
    elif request["body"] is not None:
        item["request"]["body"] = {
            "mode": "raw",
            "raw": json.dumps(request["body"], indent=2),
            "options": {"raw": {"language": "json"}},
        }
    return item


def _postman_tests(request: Dict) -> List[str]:
    if request["method"] == "DELETE":
        status = "pm.expect(pm.response.code).to.be.oneOf([200, 204]);"
    elif request["method"] == "POST" and request["name"].startswith(("Create", "Register")):
        status = "pm.expect(pm.response.code).to.be.oneOf([200, 201]);"
    else:
        status = "pm.response.to.have.status(200);"
    tests = [
        "pm.test('Status code is successful', function () {",
        f"    {status}",
        "});",
    ]
    if request["name"] == "Login":
        tests += [
            "var data = pm.response.json();",
            "pm.collectionVariables.set('accessToken', data.accessToken || data.access_token);",
            "pm.collectionVariables.set('refreshToken', data.refreshToken || data.refresh_token);",
        ]
    tests += [
        "pm.test('Response time is less than 2000ms', function () {",
        "    pm.expect(pm.response.responseTime).to.be.below(2000);",
        "});",
    ]
    return tests
