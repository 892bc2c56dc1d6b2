# kaggle-mcp

A Model Context Protocol (MCP) server that gives MCP clients access to the
Kaggle API. It speaks line-delimited JSON-RPC 2.0 over standard input and
output and offers two tools:

- `authenticate`: checks a Kaggle username and API key against the API, keeps
  them, and saves them to `~/.kaggle/kaggle.json`.
- `competitions_list`: lists Kaggle competitions, with search, category and
  group filters, sort order and paging. It refuses to run until credentials
  are loaded or `authenticate` has succeeded.

## Installation

```sh
pip install .
```

## Running the server

```sh
kaggle-mcp
```

The command reads a `.env` file if one is found from the working directory
upwards, logs to stderr, and then answers requests on stdin until the input
closes. It handles the JSON-RPC methods `initialize`, `ping`, `tools/list` and
`tools/call`; notifications get no answer. To use it with an MCP client such
as Claude Desktop, set `kaggle-mcp` as the command to start.

## Credentials

On `initialize` the server tries to load credentials, in this order:

1. The environment variables `KAGGLE_USERNAME` and `KAGGLE_KEY` (both must be
   set).
2. The file `~/.kaggle/kaggle.json`:

   ```json
   {"username": "your_username", "key": "placeholder"}
   ```

If neither is found the server still starts; use the `authenticate` tool. After
a successful `authenticate` call the credentials are written to
`~/.kaggle/kaggle.json`, which on POSIX systems gets permissions `0600`.

## Trying the API from the command line

```sh
kaggle-mcp-demo
```

This loads stored credentials and prints a few competition listings: the
latest deadlines, a search for "machine learning", featured competitions, and
competitions sorted by prize. On an error it prints the message to stderr and
exits with status 1.

## Using the client from Python

```python
from kaggle_mcp.client import KaggleClient

client = KaggleClient()
client.load_credentials()
for competition in client.list_competitions(search="titanic"):
    print(competition.ref, competition.title, competition.team_count)
```

`KaggleClient` takes an optional `api_base`, `persist_credentials` (whether
`authenticate` saves to `kaggle.json`, default `True`) and a `requests.Session`.
`list_competitions` defaults to `category="all"`, `group="general"`,
`sort_by="latestDeadline"` and `page=1`; a parameter left at its default is not
sent to the API. `competitions_list_url` builds the same URL without sending a
request.

The server can also be driven directly: `KaggleMcpServer.handle_message`
answers one decoded JSON-RPC message, and `KaggleMcpServer.serve` takes any
text streams for input and output.

Errors are raised as subclasses of `kaggle_mcp.errors.KaggleMcpError`:
`AuthenticationError`, `ApiError`, `HttpError`, `JsonError`, `IoError`,
`InvalidParameterError` and `NotAuthenticatedError`. Tool failures reach the
client as JSON-RPC error objects.

## What it does not do

Only competitions can be listed. `kaggle_mcp.models` defines `Dataset`,
`Kernel` and `Model` records and a `KaggleConfig`, but no tool or client method
fetches datasets, kernels or models, downloads files, or reads or changes
configuration.

## Running the tests

```sh
pip install ".[test]"
pytest
```