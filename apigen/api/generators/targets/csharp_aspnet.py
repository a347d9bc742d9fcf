"""C# / ASP.NET Core target: EF Core entities, services and API controllers."""

from apigen.api.extractors.type_mapper import CSharpTypeMapper
from apigen.api.generators.base import FileSpec, ProjectGenerator
from apigen.features import Feature

EF_PROVIDERS = {
    "postgresql": {
        "package": "Npgsql.EntityFrameworkCore.PostgreSQL",
        "version": "8.0.10",
        "call": "UseNpgsql(connectionString)",
    },
    "mysql": {
        "package": "Pomelo.EntityFrameworkCore.MySql",
        "version": "8.0.2",
        "call": "UseMySql(connectionString, ServerVersion.AutoDetect(connectionString))",
    },
    "sqlserver": {
        "package": "Microsoft.EntityFrameworkCore.SqlServer",
        "version": "8.0.10",
        "call": "UseSqlServer(connectionString)",
    },
    "oracle": {
        "package": "Oracle.EntityFrameworkCore",
        "version": "8.23.60",
        "call": "UseOracle(connectionString)",
    },
}
EF_PROVIDERS["mariadb"] = EF_PROVIDERS["mysql"]


def connection_string(db) -> str:
    if db.type == "postgresql":
        return f"Host={db.host};Port={db.port};Database={db.name};Username={db.username};Password={db.password}"
    if db.type == "sqlserver":
        return (f"Server={db.host},{db.port};Database={db.name};User Id={db.username};"
                f"Password={db.password};TrustServerCertificate=True")
    if db.type == "oracle":
        return f"User Id={db.username};Password={db.password};Data Source={db.host}:{db.port}/{db.name}"
    return f"Server={db.host};Port={db.port};Database={db.name};User={db.username};Password={db.password}"


class AspNetCoreGenerator(ProjectGenerator):
    language = "csharp"
    framework = "aspnetcore"
    display_name = "C# / ASP.NET Core"
    description = "ASP.NET Core 8 controllers with EF Core and xUnit"
    default_language_version = "8.0"
    default_framework_version = "8.0.10"
    supported_features = frozenset({
        Feature.CRUD, Feature.AUDITING, Feature.SOFT_DELETE, Feature.FILTERING,
        Feature.PAGINATION, Feature.OPENAPI, Feature.MIGRATIONS,
        Feature.MANY_TO_ONE, Feature.ONE_TO_MANY, Feature.MANY_TO_MANY,
        Feature.JWT_AUTH, Feature.RATE_LIMITING, Feature.UNIT_TESTS,
    })
    type_mapper_class = CSharpTypeMapper
    field_case = "pascal"
    template_subdir = "csharp_aspnet"
    supported_databases = tuple(EF_PROVIDERS)
    default_port = 5000
    run_command = "dotnet run"
    test_command = "dotnet test"

    project_files = [
        FileSpec("project.csproj.jinja", "{{ project.pascal }}.csproj"),
        FileSpec("appsettings.json.jinja", "appsettings.json"),
        FileSpec("Program.cs.jinja", "Program.cs"),
        FileSpec("Common.cs.jinja", "Common/Common.cs"),
        FileSpec("ExceptionMiddleware.cs.jinja", "Middleware/ExceptionMiddleware.cs"),
        FileSpec("AppDbContext.cs.jinja", "Data/AppDbContext.cs"),
        FileSpec("UserAccount.cs.jinja", "Auth/UserAccount.cs", Feature.JWT_AUTH),
        FileSpec("TokenService.cs.jinja", "Auth/TokenService.cs", Feature.JWT_AUTH),
        FileSpec("AuthController.cs.jinja", "Auth/AuthController.cs", Feature.JWT_AUTH),
        FileSpec("auth_tables.sql.jinja", "migrations/0002_auth.sql", Feature.JWT_AUTH,
                 when=lambda ctx: ctx["features"]["migrations"]),
        FileSpec("tests.csproj.jinja", "tests/{{ project.pascal }}.Tests/{{ project.pascal }}.Tests.csproj",
                 Feature.UNIT_TESTS),
    ]

    entity_files = [
        FileSpec("Entity.cs.jinja", "Models/{{ entity.name }}.cs"),
        FileSpec("Dtos.cs.jinja", "Dtos/{{ entity.name }}Dtos.cs"),
        FileSpec("Service.cs.jinja", "Services/{{ entity.name }}Service.cs"),
        FileSpec("Controller.cs.jinja", "Controllers/{{ entity.plural }}Controller.cs"),
        FileSpec("ServiceTests.cs.jinja",
                 "tests/{{ project.pascal }}.Tests/{{ entity.name }}ServiceTests.cs", Feature.UNIT_TESTS),
    ]

    def project_context(self, config, features):
        context = super().project_context(config, features)
        context["ef_provider"] = EF_PROVIDERS.get(config.database.type, EF_PROVIDERS["postgresql"])
        context["connection_string"] = connection_string(config.database)
        context["generator"]["test_command"] = f"dotnet test tests/{context['project']['pascal']}.Tests"
        return context
