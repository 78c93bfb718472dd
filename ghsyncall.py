#!/usr/bin/python3
"""
Clone or pull all Git repositories of a GitHub user or organisations.
"""

import argparse
import codecs
import datetime
import os
import re
import shlex
import signal
import subprocess
import sys
import threading
import time
from collections import namedtuple
from configparser import ConfigParser
from functools import partial
from urllib.parse import quote

import requests
import requests_cache


__author__ = 'Marius Gedminas <marius@gedmin.as>'
__licence__ = 'MIT'
__url__ = 'https://github.com/mgedmin/ghsyncall'
__version__ = '0.4.0'


CONFIG_FILE = '.ghsyncallrc'
CONFIG_SECTION = 'ghsyncall'


USER_AGENT = 'ghsyncall/%s (using %s)' % (
    __version__, requests.utils.default_user_agent(),
)

GITHUB_API = 'https://api.github.com'


# What RepoSyncer.sync() did with a repository
IGNORED_FORK = 'ignored-fork'
IGNORED_ARCHIVED = 'ignored-archived'
UP_TO_DATE = 'up-to-date'
CLONED = 'cloned'
PULLED = 'pulled'
FAILED = 'failed'
# --dry-run counterparts of CLONED and PULLED
WOULD_CLONE = 'would-clone'
WOULD_PULL = 'would-pull'


SyncResult = namedtuple('SyncResult', ['outcome', 'dir_exists'])


Options = namedtuple('Options', [
    'directory',
    'subdirs',
    'ignore_forks',
    'include_archived',
    'force_pull',
    'touch_pull',
    'dry_run',
    'user',
    'password',
    'otp',
    'page_size',
    'git_command',
], defaults=[
    '.',    # directory
    False,  # subdirs
    False,  # ignore_forks
    False,  # include_archived
    False,  # force_pull
    True,   # touch_pull
    False,  # dry_run
    None,   # user
    None,   # password
    None,   # otp
    100,    # page_size
    'git',  # git_command
])


class Error(Exception):
    """An error that is not a bug in this script."""


class FetchError(Error):
    """GitHub refused to give us a page of results."""

    def __init__(self, url, status_code, message):
        Error.__init__(self, '{}: {}'.format(status_code, message))
        self.url = url
        self.status_code = status_code
        self.message = message


class ProcessError(Error):
    """A child process exited with a non-zero status or was killed."""

    def __init__(self, command, returncode=None, signum=None,
                 stdout='', stderr=''):
        if signum is not None:
            message = 'process terminated by signal {}'.format(
                signal_name(signum))
        else:
            message = 'process exited with code {}'.format(returncode)
        Error.__init__(self, message)
        self.command = command
        self.returncode = returncode
        self.signum = signum
        self.stdout = stdout
        self.stderr = stderr


def signal_name(signum):
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


def parse_timestamp(value):
    """Parse a GitHub timestamp like 2011-01-26T19:06:43Z.

    Returns a timezone-aware datetime, or None if value is empty.
    """
    if not value:
        return None
    return datetime.datetime.fromisoformat(value.replace('Z', '+00:00'))


def redact_url(text):
    """Hide the password part of any user:password@host in text."""
    return re.sub(r'(://[^/:@]*):[^/@]*@', r'\1:***@', text)


def get_json_and_links(url, session=None, headers=None):
    """Perform HTTP GET for a URL, return deserialized JSON and links.

    Returns a tuple (json_data, links) where links is something dict-like,
    mapping rel values to {'rel': ..., 'url': ...}.
    """
    session = requests.Session() if session is None else session
    headers = dict(headers or {})
    headers.setdefault('user-agent', USER_AGENT)
    r = session.get(url, headers=headers)
    # When we get a JSON error response fron GitHub, we want to show that
    # message to the user instead of a traceback.  I expect it'll be something
    # like "rate limit exceeded, try again in N minutes".
    if 400 <= r.status_code < 500:
        raise FetchError(url, r.status_code, error_message(r))
    # But if GitHub is down and returns a 502 instead of a 200, let's not try
    # to parse the response as JSON.
    r.raise_for_status()
    return r.json(), r.links


def error_message(r):
    """Extract GitHub's error message, or fall back to the HTTP reason."""
    try:
        data = r.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get('message'):
        return data['message']
    return r.reason


def make_session(options):
    session = requests.Session()
    if options.user or options.password:
        session.auth = (options.user or '', options.password or '')
    return session


class Repo(object):
    def __init__(self, name, clone_url, full_name=None, fork=False,
                 archived=False, pushed_at=None):
        self.name = name
        self.clone_url = clone_url
        self.full_name = full_name or name
        self.fork = fork
        self.archived = archived
        self.pushed_at = pushed_at

    def __repr__(self):
        return 'Repo({!r}, {!r}, full_name={!r})'.format(
            self.name, self.clone_url, self.full_name)

    def __eq__(self, other):
        if not isinstance(other, Repo):
            return False
        return (
            self.name, self.clone_url, self.full_name, self.fork,
            self.archived, self.pushed_at,
        ) == (
            other.name, other.clone_url, other.full_name, other.fork,
            other.archived, other.pushed_at,
        )

    def __ne__(self, other):
        return not self.__eq__(other)

    @classmethod
    def from_repo(cls, repo):
        # Format documented at
        # https://docs.github.com/en/rest/repos/repos#list-user-repositories
        return cls(repo['name'], repo['clone_url'],
                   full_name=repo.get('full_name'),
                   fork=bool(repo.get('fork')),
                   archived=bool(repo.get('archived')),
                   pushed_at=parse_timestamp(repo.get('pushed_at')))


def synchronized(method):
    def wrapper(self, *args, **kw):
        with self.lock:
            return method(self, *args, **kw)
    return wrapper


class Hooks(object):
    """Things that get told about what's going on.

    All the methods do nothing.  Override the ones you're interested in.
    """

    def syncing_owner(self, kind, name):
        pass

    def fetching_url(self, url):
        pass

    def fetch_failed(self, url, error):
        pass

    def ignored_fork(self, repo, dir_exists):
        pass

    def ignored_archived(self, repo, dir_exists):
        pass

    def skipped_up_to_date(self, repo):
        pass

    def running_command(self, repo, cmd, cwd):
        pass

    def command_stdout(self, data):
        pass

    def command_stderr(self, data):
        pass

    def clone_succeeded(self, repo):
        pass

    def clone_failed(self, repo, error):
        pass

    def pull_succeeded(self, repo):
        pass

    def pull_failed(self, repo, error):
        pass

    def extra_repo(self, path):
        pass

    def finished(self, wrangler):
        pass


class ConsoleReporter(Hooks):
    """Hooks that tell the user what's going on.

    Most events are printed as a single line (in color, if the output is a
    terminal).  There's also a status message at the bottom, which is
    replaced or cleared by whatever comes next:

    - status(msg) replaces the status message
    - clear() clears the status message
    - line(msg) clears the status message and prints a line
    - finish(msg) clears the status message and prints a summary

    Output of git commands is passed through, with stderr going to a
    separate stream.
    """

    # XXX should use curses.tigetstr() to get these
    t_reset = '\033[m'           # curses.tigetstr('sgr0'), maybe overkill
    t_red = '\033[31m'           # curses.tparm(curses.tigetstr('setaf'), 1)
    t_green = '\033[32m'         # curses.tparm(curses.tigetstr('setaf'), 2)
    t_brown = '\033[33m'         # curses.tparm(curses.tigetstr('setaf'), 3)
    t_blue = '\033[34m'          # curses.tparm(curses.tigetstr('setaf'), 4)

    def __init__(self, stream=None, err_stream=None, color=None, quiet=False):
        self.stream = sys.stdout if stream is None else stream
        self.err_stream = sys.stderr if err_stream is None else err_stream
        if color is None:
            color = self.stream.isatty()
        self.color = color
        self.quiet = quiet
        self.last_status = ''  # so we know how many characters to erase
        self.lock = threading.RLock()
        self.done = False

    @synchronized
    def status(self, message):
        """Replace the status message."""
        if self.done:
            return
        self.clear()
        if message:
            self.stream.write('\r')
            self.stream.write(message)
            self.stream.write('\r')
            self.stream.flush()
            self.last_status = message

    @synchronized
    def clear(self):
        """Clear the status message."""
        if self.done:
            return
        if self.last_status:
            self.stream.write(
                '\r{}\r'.format(' ' * len(self.last_status.rstrip())))
            self.stream.flush()
            self.last_status = ''

    def colored(self, msg, color):
        if not self.color or not color:
            return msg
        return color + msg + self.t_reset

    @synchronized
    def line(self, msg, color=''):
        """Clear the status message and print a line."""
        if self.done:
            return
        self.clear()
        print(self.colored(msg, color), file=self.stream)
        self.stream.flush()

    @synchronized
    def finish(self, msg=''):
        """Clear the status message and print a summary.

        Differs from status(msg) in that it leaves the cursor on a new line
        and cannot be cleared.
        """
        self.clear()
        self.done = True
        if msg:
            print(msg, file=self.stream)

    def pretty_command(self, cmd):
        return redact_url(' '.join(map(shlex.quote, cmd)))

    def exists_note(self, dir_exists):
        return ' (but it exists locally)' if dir_exists else ''

    def syncing_owner(self, kind, name):
        self.line("Syncing repositories of {} {}".format(
            'organization' if kind == 'org' else 'user', name), self.t_blue)

    def fetching_url(self, url):
        self.status('Fetching {}'.format(url))

    def fetch_failed(self, url, error):
        self.line('Failed to fetch {}: {}'.format(url, error), self.t_red)

    def ignored_fork(self, repo, dir_exists):
        self.line('Ignoring fork {}{}'.format(
            repo.full_name, self.exists_note(dir_exists)), self.t_blue)

    def ignored_archived(self, repo, dir_exists):
        self.line('Ignoring archived repository {}{}'.format(
            repo.full_name, self.exists_note(dir_exists)), self.t_blue)

    def skipped_up_to_date(self, repo):
        if not self.quiet:
            self.line('{} is up to date'.format(repo.full_name))

    def running_command(self, repo, cmd, cwd):
        self.line('{}: {}'.format(cwd, self.pretty_command(cmd)),
                  self.t_brown)

    @synchronized
    def command_stdout(self, data):
        if not self.quiet:
            self.stream.write(data)
            self.stream.flush()

    @synchronized
    def command_stderr(self, data):
        if not self.quiet:
            self.err_stream.write(self.colored(data, self.t_red))
            self.err_stream.flush()

    def clone_failed(self, repo, error):
        self.line('{}: clone failed: {}'.format(repo.full_name, error),
                  self.t_red)

    def pull_failed(self, repo, error):
        self.line('{}: pull failed: {}'.format(repo.full_name, error),
                  self.t_red)

    def extra_repo(self, path):
        self.line('Extra local repository {}'.format(path), self.t_blue)

    def finished(self, wrangler):
        self.finish(self.colored(
            "{0.n_cloned} cloned, {0.n_pulled} pulled,"
            " {0.n_up_to_date} up to date, {0.n_skipped} skipped,"
            " {0.n_errors} errors.".format(wrangler), self.t_green))
        if wrangler.stale_repos:
            print(self.colored('Skipped local repositories: {}'.format(
                ' '.join(sorted(wrangler.stale_repos))), self.t_blue),
                file=self.stream)
        if wrangler.failed_repos:
            print(self.colored('Failing repositories: {}'.format(
                ' '.join(sorted(wrangler.failed_repos))), self.t_red),
                file=self.stream)
        if wrangler.extra_repos:
            print(self.colored('Extra local repositories: {}'.format(
                ' '.join(sorted(wrangler.extra_repos))), self.t_blue),
                file=self.stream)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        self.clear()
        if exc_type is KeyboardInterrupt:
            self.finish('Interrupted')


def pump(pipe, chunks, write=None):
    """Copy a child's output pipe to write() as it arrives.

    Everything is also collected in the chunks list.
    """
    decoder = codecs.getincrementaldecoder('UTF-8')('replace')
    with pipe:
        for data in iter(partial(pipe.read1, 8192), b''):
            text = decoder.decode(data)
            if text:
                chunks.append(text)
                if write:
                    write(text)
        text = decoder.decode(b'', final=True)
        if text:
            chunks.append(text)
            if write:
                write(text)


def run_command(args, cwd=None, stdout_write=None, stderr_write=None):
    """Run a command and wait for it to finish.

    Standard input is inherited, so git can ask for passwords.  Standard
    output and standard error are passed to stdout_write and stderr_write
    as they arrive.

    Returns a tuple (stdout, stderr).  Raises ProcessError if the command
    fails.  Fails to launch commands that don't exist with OSError.
    """
    p = subprocess.Popen(args, cwd=cwd, stdout=subprocess.PIPE,
                         stderr=subprocess.PIPE)
    stdout = []
    stderr = []
    pumps = [
        threading.Thread(target=pump, args=(p.stdout, stdout, stdout_write)),
        threading.Thread(target=pump, args=(p.stderr, stderr, stderr_write)),
    ]
    for t in pumps:
        t.start()
    for t in pumps:
        t.join()
    retcode = p.wait()
    stdout = ''.join(stdout)
    stderr = ''.join(stderr)
    if retcode < 0:
        raise ProcessError(args, signum=-retcode,
                           stdout=stdout, stderr=stderr)
    if retcode != 0:
        raise ProcessError(args, returncode=retcode,
                           stdout=stdout, stderr=stderr)
    return stdout, stderr


class RepoFeed(object):
    """All the repositories of a GitHub user or organization.

    Pages are fetched one at a time, and the repositories on each page are
    handed to a callback before the next page is requested.
    """

    api_url = GITHUB_API

    def __init__(self, options=None, hooks=None, session=None):
        self.options = options if options else Options()
        self.hooks = hooks if hooks else Hooks()
        self.session = (
            make_session(self.options) if session is None else session)
        self.headers = {}
        if self.options.otp:
            self.headers['x-github-otp'] = self.options.otp

    def list_url(self, kind, name):
        if kind not in ('user', 'org'):
            raise ValueError('kind must be user or org, not {!r}'.format(kind))
        return '{}/{}s/{}/repos'.format(self.api_url, kind, name)

    def fetch_all(self, kind, name, callback):
        """Call callback(repo) for every repository of a user or org.

        Supports batching (which GitHub indicates by the presence of a Link
        header, e.g. ::

            Link: <https://api.github.com/resource?page=2>; rel="next",
                  <https://api.github.com/resource?page=5>; rel="last"

        Returns True if all the pages were fetched.  If a page cannot be
        fetched, tells hooks.fetch_failed() about it and returns False
        without trying any more pages.
        """
        # API documented at http://developer.github.com/v3/#pagination
        url = '{}?per_page={}'.format(
            self.list_url(kind, name), self.options.page_size)
        while url:
            self.hooks.fetching_url(url)
            try:
                repos, links = get_json_and_links(url, self.session,
                                                  self.headers)
                if not isinstance(repos, list):
                    raise FetchError(url, 200,
                                     'expected a list of repositories')
            except (Error, requests.RequestException) as e:
                self.hooks.fetch_failed(url, e)
                return False
            for repo in repos:
                callback(Repo.from_repo(repo))
            url = links.get('next', {}).get('url')
        return True


class RepoSyncer(object):
    """Decides what to do with a repository, and does it.

    A repository that doesn't exist locally gets cloned, one that does
    exist gets pulled, unless it's been pulled since GitHub last saw a
    push.  We know when we last pulled because we set the directory mtime
    after every pull.
    """

    def __init__(self, options=None, hooks=None):
        self.options = options if options else Options()
        self.hooks = hooks if hooks else Hooks()

    def repo_dir(self, repo):
        return os.path.join(self.options.directory, repo.name)

    def repo_url(self, repo):
        url = repo.clone_url
        if self.options.user:
            auth = quote(self.options.user, safe='')
            if self.options.password:
                auth += ':' + quote(self.options.password, safe='')
            url = url.replace('://', '://{}@'.format(auth), 1)
        return url

    def git(self, *args):
        return shlex.split(self.options.git_command) + list(args)

    def is_up_to_date(self, repo, dir):
        mtime = os.path.getmtime(dir)
        if repo.pushed_at is None or self.options.force_pull:
            return False
        return mtime >= repo.pushed_at.timestamp()

    def sync(self, repo):
        """Clone or pull a repository, unless it should be left alone.

        Returns a SyncResult.  Does not raise exceptions when git fails;
        the hooks hear about failures instead.
        """
        dir = self.repo_dir(repo)
        dir_exists = os.path.exists(dir)
        if repo.fork and self.options.ignore_forks:
            self.hooks.ignored_fork(repo, dir_exists)
            return SyncResult(IGNORED_FORK, dir_exists)
        if repo.archived and not self.options.include_archived:
            self.hooks.ignored_archived(repo, dir_exists)
            return SyncResult(IGNORED_ARCHIVED, dir_exists)
        if dir_exists:
            if self.is_up_to_date(repo, dir):
                self.hooks.skipped_up_to_date(repo)
                return SyncResult(UP_TO_DATE, dir_exists)
            return self.pull(repo, dir)
        else:
            return self.clone(repo, dir)

    def clone(self, repo, dir):
        cmd = self.git('clone', '--progress', self.repo_url(repo))
        return self.execute(repo, cmd, self.options.directory, dir,
                            pull=False)

    def pull(self, repo, dir):
        cmd = self.git('pull', '--progress')
        return self.execute(repo, cmd, dir, dir, pull=True)

    def execute(self, repo, cmd, cwd, dir, pull):
        self.hooks.running_command(repo, cmd, cwd)
        if self.options.dry_run:
            return SyncResult(WOULD_PULL if pull else WOULD_CLONE, pull)
        # Remember the time before pulling: anything pushed while git is
        # running will then be pulled next time.
        now = time.time_ns()
        try:
            run_command(cmd, cwd, self.hooks.command_stdout,
                        self.hooks.command_stderr)
            if pull and self.options.touch_pull:
                os.utime(dir, ns=(now, now))
        except (ProcessError, OSError) as e:
            if pull:
                self.hooks.pull_failed(repo, e)
            else:
                self.hooks.clone_failed(repo, e)
            return SyncResult(FAILED, pull)
        if pull:
            self.hooks.pull_succeeded(repo)
            return SyncResult(PULLED, pull)
        else:
            self.hooks.clone_succeeded(repo)
            return SyncResult(CLONED, pull)


def find_extra_repos(directory, seen):
    """List Git checkouts in directory whose names are not in seen."""
    if not os.path.isdir(directory):
        return []
    return sorted(
        name for name in os.listdir(directory)
        if name not in seen
        and os.path.isdir(os.path.join(directory, name, '.git'))
    )


class RepoWrangler(object):

    def __init__(self, options=None, hooks=None, session=None):
        self.options = options if options else Options()
        self.hooks = hooks if hooks else Hooks()
        self.feed = RepoFeed(self.options, self.hooks, session)
        self.n_cloned = 0
        self.n_pulled = 0
        self.n_up_to_date = 0
        self.n_skipped = 0
        self.n_errors = 0
        self.stale_repos = []
        self.failed_repos = []
        self.extra_repos = []

    def owner_dir(self, name):
        if not self.options.subdirs:
            return self.options.directory
        return os.path.join(self.options.directory, name)

    def sync_owner(self, kind, name, seen=None):
        """Sync all the repositories of one user or organization.

        Adds the names of all the repositories seen to the seen set.

        Returns True if the list of repositories was fetched completely.
        """
        seen = set() if seen is None else seen
        directory = self.owner_dir(name)
        if not self.options.dry_run:
            os.makedirs(directory, exist_ok=True)
        syncer = RepoSyncer(self.options._replace(directory=directory),
                            self.hooks)

        def sync_repo(repo):
            seen.add(repo.name)
            self.record(repo, syncer.sync(repo))

        self.hooks.syncing_owner(kind, name)
        if not self.feed.fetch_all(kind, name, sync_repo):
            self.n_errors += 1
            return False
        return True

    def record(self, repo, result):
        outcome, dir_exists = result
        if outcome in (IGNORED_FORK, IGNORED_ARCHIVED):
            self.n_skipped += 1
            if dir_exists:
                self.stale_repos.append(repo.full_name)
        elif outcome == UP_TO_DATE:
            self.n_up_to_date += 1
        elif outcome in (CLONED, WOULD_CLONE):
            self.n_cloned += 1
        elif outcome in (PULLED, WOULD_PULL):
            self.n_pulled += 1
        elif outcome == FAILED:
            self.n_errors += 1
            self.failed_repos.append(repo.full_name)

    def report_extra_repos(self, directory, seen):
        for name in find_extra_repos(directory, seen):
            path = os.path.join(directory, name)
            self.extra_repos.append(path)
            self.hooks.extra_repo(path)

    def run(self, user=None, orgs=()):
        """Sync the repositories of all the organizations, or of the user.

        When organizations are given, the user is only used for
        authentication.
        """
        if orgs:
            owners = [('org', org) for org in orgs]
        elif user:
            owners = [('user', user)]
        else:
            raise ValueError('specify either a user or some organizations')
        if self.options.subdirs:
            for kind, name in owners:
                seen = set()
                if self.sync_owner(kind, name, seen):
                    self.report_extra_repos(self.owner_dir(name), seen)
        else:
            # Everything goes into the same directory, so we can only tell
            # which checkouts are extra once we've seen all the owners.
            seen = set()
            complete = [self.sync_owner(kind, name, seen)
                        for kind, name in owners]
            if all(complete):
                self.report_extra_repos(self.options.directory, seen)
        self.hooks.finished(self)


def read_config_file(filename):
    config = ConfigParser()
    config.read([filename])
    return config


def write_config_file(filename, config):
    with open(filename, 'w') as fp:
        config.write(fp)


CONFIG_FLAGS = ['subdirs', 'ignore_forks', 'include_archived', 'force_pull']


def _main():
    parser = argparse.ArgumentParser(
        description="Clone/pull all user/org repositories from GitHub.")
    parser.add_argument(
        '--version', action='version',
        version="%(prog)s version " + __version__)
    parser.add_argument(
        '-u', '--user',
        help='GitHub user name (also used for authentication)')
    parser.add_argument(
        '-o', '--orgs', action='append', metavar='ORG[,ORG...]',
        help='GitHub organizations (can be repeated)')
    parser.add_argument(
        '-p', '--password',
        help='GitHub password or token')
    parser.add_argument(
        '-2', '--2fa', dest='otp', metavar='CODE',
        help='two-factor authentication code')
    parser.add_argument(
        '-d', '--dir', dest='directory',
        help='target directory (default: .)')
    parser.add_argument(
        '-s', '--subdirs', action='store_true', default=None,
        help='put the repositories of each owner in a subdirectory')
    parser.add_argument(
        '--no-subdirs', action='store_false', dest='subdirs',
        help='put all the repositories in the target directory (default)')
    parser.add_argument(
        '-i', '--ignore-forks', action='store_true', default=None,
        help='ignore repositories forked from other users/orgs')
    parser.add_argument(
        '--include-forks', action='store_false', dest='ignore_forks',
        help='include repositories forked from other users/orgs (default)')
    parser.add_argument(
        '-a', '--include-archived', action='store_true', default=None,
        help='include archived repositories')
    parser.add_argument(
        '--exclude-archived', action='store_false', dest='include_archived',
        help='exclude archived repositories (default)')
    parser.add_argument(
        '-f', '--force-pull', action='store_true', default=None,
        help='pull even repositories that look up to date')
    parser.add_argument(
        '--no-touch', action='store_false', dest='touch_pull',
        help="don't update the directory mtime after pulling; without this"
             " every repository will be pulled every time")
    parser.add_argument(
        '-n', '--dry-run', action='store_true',
        help="don't pull/clone, just print what would be done")
    parser.add_argument(
        '-q', '--quiet', action='store_true',
        help="terser output")
    parser.add_argument(
        '--git-command', metavar='COMMAND',
        help='how to run git (default: git)')
    parser.add_argument(
        '--page-size', type=int, default=100, metavar='N',
        help='how many repositories to ask for at a time'
             ' (default: %(default)s)')
    parser.add_argument(
        '--init', action='store_true',
        help='create a {} from command-line arguments'.format(CONFIG_FILE))
    parser.add_argument(
        '--http-cache', default='.httpcache', metavar='DBNAME',
        # requests-cache adds .sqlite only when the name has no .
        help='cache HTTP requests on disk in an sqlite database for 5 minutes'
             ' (default: .httpcache)')
    parser.add_argument(
        '--no-http-cache', action='store_false', dest='http_cache',
        help='disable HTTP disk caching')
    args = parser.parse_args()

    if args.orgs:
        args.orgs = [org for value in args.orgs
                     for org in value.split(',') if org]

    config = read_config_file(CONFIG_FILE)
    if not args.user and not args.orgs:
        if config.has_option(CONFIG_SECTION, 'github_user'):
            args.user = config.get(CONFIG_SECTION, 'github_user')
        if config.has_option(CONFIG_SECTION, 'github_orgs'):
            args.orgs = [
                org for org in
                config.get(CONFIG_SECTION, 'github_orgs').split(',') if org]
    if not args.directory:
        if config.has_option(CONFIG_SECTION, 'directory'):
            args.directory = config.get(CONFIG_SECTION, 'directory')
    if not args.git_command:
        if config.has_option(CONFIG_SECTION, 'git_command'):
            args.git_command = config.get(CONFIG_SECTION, 'git_command')
    for flag in CONFIG_FLAGS:
        if getattr(args, flag) is None:
            if config.has_option(CONFIG_SECTION, flag):
                setattr(args, flag, config.getboolean(CONFIG_SECTION, flag))

    if not args.user and not args.orgs:
        parser.error("Please specify either --user or --orgs")

    if args.init:
        config.remove_section(CONFIG_SECTION)
        config.add_section(CONFIG_SECTION)
        if args.user:
            config.set(CONFIG_SECTION, 'github_user', args.user)
        if args.orgs:
            config.set(CONFIG_SECTION, 'github_orgs', ','.join(args.orgs))
        if args.directory:
            config.set(CONFIG_SECTION, 'directory', args.directory)
        if args.git_command:
            config.set(CONFIG_SECTION, 'git_command', args.git_command)
        for flag in CONFIG_FLAGS:
            if getattr(args, flag) is not None:
                config.set(CONFIG_SECTION, flag, str(getattr(args, flag)))
        if not args.dry_run:
            write_config_file(CONFIG_FILE, config)
            print("Wrote {}".format(CONFIG_FILE))
        else:
            print(
                "Did not write {} because --dry-run was specified".format(
                    CONFIG_FILE))
        return

    if args.http_cache:
        requests_cache.install_cache(args.http_cache,
                                     backend='sqlite',
                                     expire_after=300)

    with ConsoleReporter(quiet=args.quiet) as reporter:
        git_command = args.git_command
        if not git_command:
            git_command = 'git -c color.ui=always' if reporter.color else 'git'
        options = Options(
            directory=args.directory or '.',
            subdirs=bool(args.subdirs),
            ignore_forks=bool(args.ignore_forks),
            include_archived=bool(args.include_archived),
            force_pull=bool(args.force_pull),
            touch_pull=args.touch_pull,
            dry_run=args.dry_run,
            user=args.user,
            password=args.password,
            otp=args.otp,
            page_size=args.page_size,
            git_command=git_command,
        )
        wrangler = RepoWrangler(options, reporter)
        wrangler.run(user=args.user, orgs=args.orgs)


def main():
    try:
        _main()
    except Error as e:
        sys.exit(e)
    except KeyboardInterrupt:
        pass


if __name__ == '__main__':
    main()
