from rich import print
from rich.pretty import pprint

from envoke import *


@schema
class Server:
    port = Field("APP_PORT", int, "8080")


@schema
class Database:
    dsn = Field("DB_DSN")
    pool = Field("DB_POOL", int, "10")


@schema
class Config:
    app = Record(Server)
    database = Record(Database)
    hosts = Field("ALLOWED_HOSTS", list[str], "localhost,127.0.0.1")
    must_exist = Field("MUST_EXIST", int, "999", required=True)


def serve(context, args, flags, /):
    print("Starting server...")
    print("HTTP: %s" % flags.get("http", ""))
    print("gRPC: %s" % flags.get("grpc", ""))
    print("Consumer: %s" % flags.get("consumer", ""))


def migrate(context, args, flags, /):
    if "migrate-old-user" in flags:
        print("Migrating old user data...")
    if "migrate-old-transactions" in flags:
        print("Migrating old transaction data...")


def create_sql(context, args, flags, /):
    output = flags.get("output") or flags.get("o") or "./sql"
    print("Creating SQL files in %s..." % output)


def configure(context, args, flags, /):
    if "set" in flags:
        key, separator, value = flags["set"].partition("=")
        if separator:
            print("Setting configuration: %s = %s" % (key, value))
        else:
            print("Invalid format for --set. Use key=value")
    if "get" in flags:
        print("Getting configuration value for: %s" % flags["get"])
    if "remove" in flags:
        print("Removing configuration value: %s" % flags["remove"])


app = App(
    "myapp",
    version="1.0.0",
    description="A sample CLI application built with envoke",
    commands=[
        Command("serve", serve, short="Start the server with specified services", flags=[
            Flag("http", usage="HTTP service configuration (e.g., all, none, specific)"),
            Flag("grpc", usage="gRPC service modules (e.g., module1,module2)"),
            Flag("consumer", usage="Consumer service modules (e.g., module1,module2)"),
        ]),
        Command("exec", migrate, short="Execute specific operations", flags=[
            Flag("migrate-old-user", usage="Migrate old user data"),
            Flag("migrate-old-transactions", usage="Migrate old transaction data"),
        ]),
        Command("db", short="Database operations", subcommands=[
            Subcommand("init", lambda context, args, flags: print("Initializing database..."), short="Initialize the database"),
            Subcommand("migrate", lambda context, args, flags: print("Running database migrations..."), short="Run database migrations"),
            Subcommand("create_sql", create_sql, short="Generate SQL files", flags=[
                Flag("output", "o", usage="Output directory for SQL files"),
            ]),
        ]),
        Command("config", configure, short="Manage application configuration", flags=[
            Flag("set", usage="Set a configuration value (key=value format)"),
            Flag("get", usage="Get a configuration value by key"),
            Flag("remove", usage="Remove a configuration value by key"),
        ]),
    ],
)


if __name__ == '__main__':
    pprint(load(Config, shell=True))
    execute(app)
