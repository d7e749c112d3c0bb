# Contributions for one user, from $startDate up to now.
CONTRIBUTIONS = """
query Contributions($username: String!, $startDate: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $startDate) {
      issueContributionsByRepository(maxRepositories: 100) {
        repository { nameWithOwner url }
        contributions(first: 100) {
          totalCount
          nodes {
            issue { createdAt title url state }
          }
        }
      }
      pullRequestContributionsByRepository(maxRepositories: 100) {
        repository { nameWithOwner url }
        contributions(first: 100) {
          totalCount
          nodes {
            pullRequest { createdAt title url changedFiles state }
          }
        }
      }
      pullRequestReviewContributionsByRepository(maxRepositories: 100) {
        repository { nameWithOwner url }
        contributions(first: 100) {
          totalCount
          nodes {
            pullRequest { createdAt title url state }
          }
        }
      }
    }
  }
}
"""

USER_NODE_ID = """
query UserNodeId($username: String!) {
  user(login: $username) { id }
}
"""

ORGANIZATION_PROJECT_NODE_ID = """
query OrganizationProjectNodeId($login: String!, $projectNumber: Int!) {
  organization(login: $login) {
    projectV2(number: $projectNumber) { id }
  }
}
"""

USER_PROJECT_NODE_ID = """
query UserProjectNodeId($login: String!, $projectNumber: Int!) {
  user(login: $login) {
    projectV2(number: $projectNumber) { id }
  }
}
"""

REPOSITORY_NODE_ID = """
query RepositoryNodeId($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) { id }
}
"""

CREATE_ISSUE = """
mutation CreateIssue($repositoryId: ID!, $userId: ID!, $title: String!, $body: String!) {
  createIssue(input: {
    repositoryId: $repositoryId
    assigneeIds: [$userId]
    title: $title
    body: $body
  }) {
    issue { id number url }
  }
}
"""

ADD_ISSUE_TO_PROJECT = """
mutation AddIssueToProject($projectId: ID!, $issueId: ID!) {
  addProjectV2ItemById(input: {projectId: $projectId, contentId: $issueId}) {
    item { id }
  }
}
"""
