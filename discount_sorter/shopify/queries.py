"""
GraphQL query strings for Shopify Admin API.
"""


# One page of a collection's products with variant prices.
# $first bounds products per page (max 250), $variantsFirst bounds variants per product.
COLLECTION_PRODUCTS_QUERY = '''
query CollectionProducts($id: ID!, $first: Int!, $variantsFirst: Int!, $cursor: String) {
  collection(id: $id) {
    id
    sortOrder
    products(first: $first, after: $cursor) {
      edges {
        cursor
        node {
          id
          variants(first: $variantsFirst) {
            nodes {
              price
              compareAtPrice
            }
            pageInfo {
              hasNextPage
              endCursor
            }
          }
        }
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
'''


# Remaining variants of a product whose first variant page was cut short.
PRODUCT_VARIANTS_QUERY = '''
query ProductVariants($id: ID!, $first: Int!, $cursor: String) {
  product(id: $id) {
    id
    variants(first: $first, after: $cursor) {
      nodes {
        price
        compareAtPrice
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
'''
