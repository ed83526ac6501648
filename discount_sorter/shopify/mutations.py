"""
GraphQL mutation strings for Shopify Admin API.
"""


# Mutation to switch a collection's sort order (used to force MANUAL)
COLLECTION_UPDATE_SORT_ORDER = '''
mutation CollectionUpdateSortOrder($input: CollectionInput!) {
  collectionUpdate(input: $input) {
    collection {
      id
      sortOrder
    }
    userErrors {
      field
      message
    }
  }
}
'''

# Mutation to reposition products inside a MANUAL collection
COLLECTION_REORDER_PRODUCTS = '''
mutation CollectionReorderProducts($id: ID!, $moves: [MoveInput!]!) {
  collectionReorderProducts(id: $id, moves: $moves) {
    job {
      id
      done
    }
    userErrors {
      field
      message
    }
  }
}
'''
