import argparse
import json
import sys

from sp_client import Settings, SharePointQueryableCollection, client_from_settings


def build_parser():
    p = argparse.ArgumentParser(prog="sp-query", description="Query a SharePoint site over REST")
    p.add_argument("--site", help="site url (default: $SP_SITE_URL)")
    p.add_argument("-v", "--verbose", action="store_true", help="print transport/alias/batch diagnostics")
    sub = p.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("get", help="GET a path relative to the site, e.g. _api/web/lists")
    g.add_argument("path")
    g.add_argument("--select", nargs="*", default=[])
    g.add_argument("--expand", nargs="*", default=[])
    g.add_argument("--filter")
    g.add_argument("--order-by", action="append", default=[], help="field or field:desc, repeatable")
    g.add_argument("--top", type=int)
    g.add_argument("--skip", type=int)

    s = sub.add_parser("suggest", help="search suggestions for a query text")
    s.add_argument("text")
    s.add_argument("--count", type=int)
    return p


def run(args, client):
    if args.cmd == "get":
        q = client.queryable(args.path, SharePointQueryableCollection)
        q.select(*args.select).expand(*args.expand)
        if args.filter:
            q.filter(args.filter)
        for ob in args.order_by:
            field, _, direction = ob.partition(":")
            q.order_by(field, direction.lower() != "desc")
        if args.top is not None:
            q.top(args.top)
        if args.skip is not None:
            q.skip(args.skip)
        return q.get()
    return client.suggest({"querytext": args.text, "count": args.count})


def main(argv=None):
    args = build_parser().parse_args(argv)
    log = (lambda msg: print(msg, file=sys.stderr)) if args.verbose else None
    client = client_from_settings(Settings(site_url=args.site), log=log)
    print(json.dumps(run(args, client), indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
