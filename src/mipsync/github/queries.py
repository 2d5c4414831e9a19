"""GraphQL documents for the repository pull request feed"""

PULL_REQUEST_FIELDS = """
      totalCount
      pageInfo {
        hasNextPage
        endCursor
        hasPreviousPage
        startCursor
      }
      edges {
        node {
          id
          number
          title
          url
          state
          createdAt
          updatedAt
          author {
            login
          }
          files(first: 100) {
            nodes {
              path
            }
          }
        }
      }
"""

PULL_REQUESTS_COUNT = """
query pullRequestsCount($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    pullRequests {
      totalCount
    }
  }
}
"""

PULL_REQUESTS = """
query pullRequests($owner: String!, $name: String!, $first: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequests(first: $first) {%s}
  }
}
""" % PULL_REQUEST_FIELDS

PULL_REQUESTS_AFTER = """
query pullRequestsAfter($owner: String!, $name: String!, $first: Int!, $after: String!) {
  repository(owner: $owner, name: $name) {
    pullRequests(first: $first, after: $after) {%s}
  }
}
""" % PULL_REQUEST_FIELDS

PULL_REQUESTS_LAST = """
query pullRequestsLast($owner: String!, $name: String!, $last: Int!, $before: String) {
  repository(owner: $owner, name: $name) {
    pullRequests(last: $last, before: $before) {%s}
  }
}
""" % PULL_REQUEST_FIELDS
