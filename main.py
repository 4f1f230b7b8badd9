from rich.pretty import pprint

from argosy import *

__prog__ = "ship"


@command(
    args={
        "src": Arg("file to upload", type=File, required=True),
        "dest": Arg("remote folder", default="inbox"),
        "retries": Arg("attempts before giving up", type=Nat, default=1, flags={"r": 3}),
        "verbose": Arg("chatty output", type=Bool, flags="v"),
    },
    default_params=[["src"], ["src", "dest"]],
)
def upload(record):
    """upload a file"""
    return dict(record)


@command(args={"force": Arg("overwrite an existing vault", type=Bool, flags="f")})
def init(record):
    """create an empty vault"""
    return dict(record)


ship = Command("ship files around", subcommands={"upload": upload, "init": init})


if __name__ == '__main__':
    pprint(invoke(ship, shell=True, fancy=True))
